from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from elasticsearch import NotFoundError

from site_search_sync.config import Config
from site_search_sync.errors import ConfigError
from site_search_sync.indexer import SearchIndex, build_es_client


def _index():
    es = MagicMock()
    es.delete_by_query = AsyncMock()
    es.close = AsyncMock()
    return SearchIndex(es, "site"), es


class TestBuildClient:
    def test_single_node(self):
        with patch("site_search_sync.indexer.AsyncElasticsearch") as cls:
            build_es_client(Config(es_url="http://es:9200", es_api_key="k"))
        cls.assert_called_once_with(hosts=["http://es:9200"], api_key="k")

    def test_basic_auth(self):
        with patch("site_search_sync.indexer.AsyncElasticsearch") as cls:
            build_es_client(Config(es_username="elastic", es_password="pw"))
        assert cls.call_args.kwargs["basic_auth"] == ("elastic", "pw")

    def test_cluster_requires_fingerprint(self):
        with pytest.raises(ConfigError):
            build_es_client(Config(es_nodes=["https://es01:9200"], es_api_key="k"))

    def test_cluster_requires_credentials(self):
        with pytest.raises(ConfigError):
            build_es_client(Config(es_nodes=["https://es01:9200"], es_fingerprint="AA:BB"))

    def test_cluster(self):
        config = Config(
            es_nodes=["https://es01:9200", "https://es02:9200"],
            es_fingerprint="AA:BB",
            es_api_key="k",
        )
        with patch("site_search_sync.indexer.AsyncElasticsearch") as cls:
            build_es_client(config)
        kwargs = cls.call_args.kwargs
        assert kwargs["hosts"] == ["https://es01:9200", "https://es02:9200"]
        assert kwargs["ssl_assert_fingerprint"] == "AA:BB"
        assert kwargs["verify_certs"] is False


@pytest.mark.asyncio
async def test_clear_objects_deletes_everything():
    index, es = _index()
    await index.clear_objects()
    es.delete_by_query.assert_awaited_once()
    kwargs = es.delete_by_query.call_args.kwargs
    assert kwargs["index"] == "site"
    assert kwargs["query"] == {"match_all": {}}


@pytest.mark.asyncio
async def test_clear_objects_missing_index():
    index, es = _index()
    es.delete_by_query.side_effect = NotFoundError("index_not_found", MagicMock(status=404), {})
    await index.clear_objects()


@pytest.mark.asyncio
async def test_clear_objects_propagates_other_errors():
    index, es = _index()
    es.delete_by_query.side_effect = ConnectionError("down")
    with pytest.raises(ConnectionError):
        await index.clear_objects()


@pytest.mark.asyncio
async def test_save_objects_uses_object_id():
    index, es = _index()
    docs = [{"objectID": "a", "title": "A"}, {"objectID": 2, "title": "B"}]
    with patch("site_search_sync.indexer.async_bulk", AsyncMock(return_value=(2, []))) as bulk:
        assert await index.save_objects(docs) == 2

    actions = bulk.call_args.args[1]
    assert [a["_id"] for a in actions] == ["a", "2"]
    assert all(a["_index"] == "site" for a in actions)
    assert actions[0]["_source"] == {"objectID": "a", "title": "A"}
    assert bulk.call_args.kwargs["chunk_size"] == 2


@pytest.mark.asyncio
async def test_save_objects_raises_on_item_errors():
    index, _ = _index()
    with patch("site_search_sync.indexer.async_bulk", AsyncMock(return_value=(1, [{"index": {}}]))):
        with pytest.raises(RuntimeError, match="1 failures"):
            await index.save_objects([{"objectID": "a"}, {"objectID": "b"}])


@pytest.mark.asyncio
async def test_close():
    index, es = _index()
    await index.close()
    es.close.assert_awaited_once()
