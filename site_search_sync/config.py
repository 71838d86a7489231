"""동기화 설정

우선순위: 환경변수 > 설정 파일(JSON) > 기본값

    config = Config.from_file(Path("search.json"))   # 환경변수 자동 반영
    config = Config(index_name="blog", chunk_size=1000)
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Mapping

from .data import DEFAULT_CHUNK_SIZE
from .errors import ConfigError
from .fields import FieldSelection

ENV_PREFIX = "SITE_SEARCH_"

# 환경변수 → (Config 필드, 변환 함수)
ENV_OVERRIDES = {
    f"{ENV_PREFIX}ES_URL": ("es_url", str),
    f"{ENV_PREFIX}API_KEY": ("es_api_key", str),
    f"{ENV_PREFIX}INDEX_NAME": ("index_name", str),
    f"{ENV_PREFIX}CHUNK_SIZE": ("chunk_size", int),
}

DEFAULT_POST_FIELDS = [
    "title",
    "slug",
    "path",
    "permalink",
    "date",
    "tags",
    "categories",
    "excerpt:strip",
    "content:strip:truncate,0,500",
]

DEFAULT_PAGE_FIELDS = [
    "title",
    "path",
    "permalink",
    "date",
    "content:strip:truncate,0,500",
]


@dataclass
class Config:
    # Elasticsearch 연결
    es_url: str = "http://localhost:9200"
    es_nodes: list[str] | None = None       # 클러스터 노드 목록 (설정 시 es_url 무시)
    es_fingerprint: str | None = None       # TLS 인증서 SHA-256 fingerprint (클러스터 시 필수)
    es_username: str | None = None
    es_password: str | None = field(default=None, repr=False)
    es_api_key: str | None = field(default=None, repr=False)  # 관리자 API Key (basic_auth 대신)

    # 인덱스
    index_name: str = "site"
    chunk_size: int = DEFAULT_CHUNK_SIZE

    # 필드 스펙
    post_fields: list[str] = field(default_factory=lambda: list(DEFAULT_POST_FIELDS))
    page_fields: list[str] = field(default_factory=lambda: list(DEFAULT_PAGE_FIELDS))

    # 콘텐츠 소스
    db_path: Path = Path("db.json")
    generate_command: list[str] | None = None   # 예: ["hexo", "generate"]

    # 업로드 동시성 (0 = 제한 없음, 모든 청크 동시 전송)
    workers: int = 0

    # 실패 청크 JSONL 기록 (None = 기록 안 함)
    failure_log_path: Path | None = None

    post_selection: FieldSelection = field(init=False, repr=False)
    page_selection: FieldSelection = field(init=False, repr=False)

    def __post_init__(self):
        if isinstance(self.chunk_size, bool) or not isinstance(self.chunk_size, int) \
                or self.chunk_size <= 0:
            raise ConfigError(f"chunk_size must be a positive integer, got {self.chunk_size!r}")
        if self.workers < 0:
            raise ConfigError(f"workers must be >= 0, got {self.workers!r}")
        self.db_path = Path(self.db_path)
        if self.failure_log_path is not None:
            self.failure_log_path = Path(self.failure_log_path)
        # 필드 스펙은 여기서 한 번만 파싱
        self.post_selection = FieldSelection.from_specs(self.post_fields)
        self.page_selection = FieldSelection.from_specs(self.page_fields)

    def with_env(self, env: Mapping[str, str] | None = None) -> Config:
        """환경변수 값으로 덮어쓴 새 Config 반환"""
        env = os.environ if env is None else env
        overrides = {}
        for var, (name, convert) in ENV_OVERRIDES.items():
            raw = env.get(var)
            if not raw:
                continue
            try:
                overrides[name] = convert(raw)
            except ValueError as e:
                raise ConfigError(f"{var}: invalid value {raw!r}") from e
        return replace(self, **overrides) if overrides else self

    @classmethod
    def from_file(
        cls,
        path: Path,
        env: Mapping[str, str] | None = None,
        **overrides,
    ) -> Config:
        """
        JSON 설정 파일 로드.

        파일 최상위 또는 "search" 키 아래의 객체를 읽는다.
        overrides(CLI 인자)는 파일 값을 덮어쓰고, 환경변수는 그 위에 적용.

        Raises:
            ConfigError: 파일 읽기 실패, JSON 파싱 실패, 알 수 없는 키
        """
        try:
            raw = json.loads(Path(path).read_text(encoding="utf-8"))
        except OSError as e:
            raise ConfigError(f"{path}: cannot read ({e})") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"{path}: invalid JSON ({e})") from e
        if isinstance(raw, dict) and isinstance(raw.get("search"), dict):
            raw = raw["search"]
        if not isinstance(raw, dict):
            raise ConfigError(f"{path}: expected a JSON object")

        allowed = {f.name for f in fields(cls) if f.init}
        unknown = sorted(set(raw) - allowed)
        if unknown:
            raise ConfigError(f"{path}: unknown config keys {unknown}")

        values = {**raw, **{k: v for k, v in overrides.items() if v is not None}}
        return cls(**values).with_env(env)
