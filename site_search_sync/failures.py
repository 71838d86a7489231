"""실패한 청크 업로드를 JSONL 파일에 기록 (수동 재처리용)"""

import asyncio
import json
import logging
import time
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class AsyncFailureLogger:
    """
    비동기 안전 실패 로거 (JSONL).

    동시에 실패한 청크들이 한 파일에 섞여 쓰이지 않도록 asyncio.Lock 사용.
    log_path가 None이면 아무것도 기록하지 않는다.

    사용 예:
        fl = AsyncFailureLogger(Path("logs/failures.jsonl"))
        await fl.log_failure(chunk_id=0, error=e, data_info={"count": 10})
    """

    def __init__(self, log_path: Path | None):
        self.log_path = log_path
        self._lock = asyncio.Lock()
        self._count = 0
        if log_path is not None:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def enabled(self) -> bool:
        return self.log_path is not None

    async def log_failure(
        self,
        chunk_id: int,
        error: Exception | str,
        data_info: dict[str, Any] | None = None,
    ):
        if not self.enabled:
            return

        record = {
            "chunk_id": chunk_id,
            "error_type": type(error).__name__ if isinstance(error, Exception) else "str",
            "error_message": str(error),
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%S"),
            **(data_info or {}),
        }
        async with self._lock:
            with open(self.log_path, "a", encoding="utf-8") as f:
                f.write(json.dumps(record, ensure_ascii=False, default=str) + "\n")
            self._count += 1

        logger.warning(f"[red]실패 기록[/red] chunk_id={chunk_id}: {error}")

    @property
    def count(self) -> int:
        return self._count
