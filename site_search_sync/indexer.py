"""Elasticsearch 검색 인덱스 — 전체 삭제 + 벌크 upsert"""

from __future__ import annotations

from typing import Any, Sequence

from elasticsearch import AsyncElasticsearch, NotFoundError
from elasticsearch.helpers import async_bulk

from .config import Config
from .errors import ConfigError


def build_es_client(config: Config) -> AsyncElasticsearch:
    """Config 기반으로 AsyncElasticsearch 클라이언트를 생성.

    - 단일 노드 (HTTP): es_url 사용
    - 클러스터 (HTTPS): es_nodes 사용 — fingerprint 필수

    Examples:
        config = Config(es_url="http://localhost:9200")

        config = Config(
            es_nodes=["https://es01:9200", "https://es02:9200"],
            es_fingerprint="B1:2A:...:CF",
            es_api_key="...",
        )
    """
    hosts = config.es_nodes or [config.es_url]

    if config.es_nodes is not None:
        if not config.es_fingerprint:
            raise ConfigError(
                "es_fingerprint 필수: 클러스터 연결에는 TLS 인증서 fingerprint가 필요합니다."
            )
        if not config.es_api_key and not (config.es_username and config.es_password):
            raise ConfigError(
                "인증 정보 필수: es_api_key 또는 es_username + es_password를 지정하세요."
            )

    kwargs: dict = {"hosts": hosts}

    if config.es_api_key:
        kwargs["api_key"] = config.es_api_key
    elif config.es_username and config.es_password:
        kwargs["basic_auth"] = (config.es_username, config.es_password)

    if config.es_fingerprint:
        kwargs["ssl_assert_fingerprint"] = config.es_fingerprint
        kwargs["verify_certs"] = False

    return AsyncElasticsearch(**kwargs)


class SearchIndex:
    """
    원격 검색 인덱스.

    도큐먼트의 objectID를 ES _id로 사용하므로 save_objects는 upsert로 동작.
    """

    def __init__(self, es: AsyncElasticsearch, index_name: str):
        self.es = es
        self.index_name = index_name

    @classmethod
    def from_config(cls, config: Config) -> SearchIndex:
        return cls(build_es_client(config), config.index_name)

    async def clear_objects(self) -> None:
        """인덱스의 모든 도큐먼트 삭제 (인덱스 설정/매핑은 유지). 인덱스가 없으면 무시."""
        try:
            await self.es.delete_by_query(
                index=self.index_name,
                query={"match_all": {}},
                conflicts="proceed",
                refresh=True,
            )
        except NotFoundError:
            pass

    async def save_objects(self, documents: Sequence[dict[str, Any]]) -> int:
        """도큐먼트 배치를 한 번의 벌크 요청으로 upsert. 성공 건수 반환."""
        actions = [
            {
                "_op_type": "index",
                "_index": self.index_name,
                "_id": str(doc["objectID"]),
                "_source": doc,
            }
            for doc in documents
        ]
        success, errors = await async_bulk(
            self.es, actions, chunk_size=max(len(actions), 1), raise_on_error=False
        )
        if errors:
            raise RuntimeError(f"Bulk index errors: {len(errors)} failures")
        return success

    async def close(self):
        await self.es.close()
