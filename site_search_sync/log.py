"""
패키지 로깅 설정 (Rich console + plain-text file)

설계:
  - Console: RichHandler (colored, timestamps, markup 지원)
  - File:    FileHandler (plain text, Rich markup 자동 제거)
  - 동기화 단계별 이벤트는 record.event 로 식별 (SyncEvent)

사용법:
    from site_search_sync.log import setup_logging, get_logger, SyncEvent

    logger = get_logger(PKG_NAME, "pipeline")
    setup_logging(log_file=Path("logs/sync.log"))
    logger.info("[bold green]완료![/bold green]", extra=SyncEvent.INDEXED.extra())
"""

import logging
from enum import Enum
from pathlib import Path

from rich.logging import RichHandler
from rich.text import Text

PKG_NAME = "site_search_sync"


class SyncEvent(str, Enum):
    """테스트/모니터링에서 식별 가능한 로그 이벤트"""

    NO_POSTS = "no_posts"
    MISSING_FIELD = "missing_field"
    CLEAR_START = "clear_start"
    CLEAR_DONE = "clear_done"
    CLEAR_FAILED = "clear_failed"
    UPLOAD_START = "upload_start"
    UPLOAD_FAILED = "upload_failed"
    INDEXED = "indexed"

    def extra(self) -> dict:
        """logger.*(..., extra=...) 에 넘길 dict"""
        return {"event": self.value}


class _PlainFormatter(logging.Formatter):
    """
    Rich markup 태그를 제거하는 FileHandler용 Formatter.

    예: "[bold green]완료![/bold green]" → "완료!"
    """

    def format(self, record: logging.LogRecord) -> str:
        original_msg = record.msg
        try:
            record.msg = Text.from_markup(str(record.msg)).plain
        except (ValueError, KeyError, AttributeError):
            pass
        result = super().format(record)
        record.msg = original_msg
        return result


def setup_logging(
    pkg_name: str = PKG_NAME,
    log_file: Path | None = None,
    level: int = logging.INFO,
) -> logging.Logger:
    """
    패키지 루트 로거에 핸들러를 설정.

    - RichHandler: 첫 호출 시 1회만 추가 (콘솔 출력)
    - FileHandler: log_file 인자가 있을 때마다 추가

    Returns:
        패키지 루트 로거
    """
    logger = logging.getLogger(pkg_name)
    logger.setLevel(level)

    has_rich = any(isinstance(h, RichHandler) for h in logger.handlers)
    if not has_rich:
        console = RichHandler(
            rich_tracebacks=True,
            show_path=False,
            markup=True,
            log_time_format="[%H:%M:%S]",
        )
        console.setLevel(level)
        logger.addHandler(console)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(_PlainFormatter("%(asctime)s  %(levelname)s  %(message)s"))
        fh.setLevel(level)
        logger.addHandler(fh)

    return logger


def get_logger(pkg_name: str = PKG_NAME, name: str | None = None) -> logging.Logger:
    """
    패키지 하위 로거 반환.

    예: get_logger("site_search_sync", "pipeline")
        → logging.getLogger("site_search_sync.pipeline")
    """
    if name:
        return logging.getLogger(f"{pkg_name}.{name}")
    return logging.getLogger(pkg_name)
