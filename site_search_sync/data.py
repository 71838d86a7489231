"""배치 유틸리티"""

from __future__ import annotations

from typing import Sequence, TypeVar

T = TypeVar("T")

# 벌크 업로드 시 한 요청에 담을 기본 도큐먼트 수
DEFAULT_CHUNK_SIZE = 5000


def split_into_chunks(items: Sequence[T], chunk_size: int) -> list[list[T]]:
    """
    시퀀스를 chunk_size 이하의 리스트로 분할 (순서 유지, 마지막 청크만 작을 수 있음).

    사용 예:
        split_into_chunks([1, 2, 3, 4, 5], 2)  # → [[1, 2], [3, 4], [5]]
        split_into_chunks([], 2)               # → []
    """
    if isinstance(chunk_size, bool) or not isinstance(chunk_size, int) or chunk_size <= 0:
        raise ValueError(f"chunk_size must be a positive integer, got {chunk_size!r}")
    return [list(items[i : i + chunk_size]) for i in range(0, len(items), chunk_size)]
