"""동기화 실행 중 발생하는 예외 계층"""


class SyncError(Exception):
    """모든 동기화 실패의 베이스. CLI는 이 예외를 종료 코드 1로 변환."""


class ConfigError(SyncError):
    """잘못된 설정 (chunk_size <= 0, 알 수 없는 설정 키 등)"""


class FilterError(SyncError):
    """필터 체인 실행 실패"""


class UnknownFilterError(FilterError):
    """레지스트리에 없는 필터 이름"""

    def __init__(self, name: str):
        super().__init__(f"Unknown filter: {name!r}")
        self.name = name


class FilterArgumentError(FilterError):
    """필터 인자 변환 실패 (예: truncate,a,b)"""


class GenerateFailedError(SyncError):
    """호스트 파이프라인의 사이트 생성 단계 실패"""


class ClearFailedError(SyncError):
    """인덱스 초기화 실패 — 업로드 전에 실행을 중단"""


class UploadChunkFailedError(SyncError):
    """청크 업로드 실패. 다른 청크의 결과는 별도로 보고하지 않음."""

    def __init__(self, chunk_id: int, size: int, cause: Exception):
        super().__init__(
            f"Chunk {chunk_id} ({size} docs) upload failed: {cause}"
        )
        self.chunk_id = chunk_id
        self.size = size


class ContentLoadError(SyncError):
    """콘텐츠 DB 파일을 읽을 수 없음 (없음, 깨진 JSON)"""
