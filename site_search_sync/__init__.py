"""
site_search_sync — 사이트 콘텐츠(post/page) → Elasticsearch 검색 인덱스 동기화

    from site_search_sync import Config, run_sync
    run_sync(Config.from_file(Path("search.json")), clear=True)

필드 스펙 DSL:
    "title"                        → title 필드 그대로 복사
    "tags"                         → tag 이름 리스트
    "content:strip:truncate,0,200" → contentStripTruncate (HTML 제거 후 앞 200자)
"""

from .config import Config
from .data import DEFAULT_CHUNK_SIZE, split_into_chunks
from .errors import (
    ClearFailedError,
    ConfigError,
    ContentLoadError,
    FilterArgumentError,
    FilterError,
    GenerateFailedError,
    SyncError,
    UnknownFilterError,
    UploadChunkFailedError,
)
from .fields import (
    FieldSelection,
    FilterStep,
    ParsedFieldSpec,
    get_basic_fields,
    get_fields_with_filters,
    parse_field_spec,
)
from .filters import FilterKind, FilterRegistry, default_registry
from .indexer import SearchIndex, build_es_client
from .log import SyncEvent, get_logger, setup_logging
from .pipeline import SyncResult, run_sync, sync_contents
from .source import ContentQuery, ContentSource, JsonContentStore
from .transform import prepare_contents

__all__ = [
    # Config
    "Config",
    # Fields / Filters
    "FieldSelection",
    "FilterStep",
    "ParsedFieldSpec",
    "get_basic_fields",
    "get_fields_with_filters",
    "parse_field_spec",
    "FilterKind",
    "FilterRegistry",
    "default_registry",
    # Transform / Batch
    "prepare_contents",
    "split_into_chunks",
    "DEFAULT_CHUNK_SIZE",
    # Source / Index
    "ContentSource",
    "ContentQuery",
    "JsonContentStore",
    "SearchIndex",
    "build_es_client",
    # Pipeline
    "SyncResult",
    "sync_contents",
    "run_sync",
    # Logging
    "SyncEvent",
    "setup_logging",
    "get_logger",
    # Errors
    "SyncError",
    "ConfigError",
    "ContentLoadError",
    "FilterError",
    "UnknownFilterError",
    "FilterArgumentError",
    "GenerateFailedError",
    "ClearFailedError",
    "UploadChunkFailedError",
]
