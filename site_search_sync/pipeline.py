"""사이트 콘텐츠 → 검색 인덱스 동기화 파이프라인

단계:
    [1/4] Fetch      사이트 생성 + 콘텐츠 로드 (게시된 post가 없으면 정상 종료)
    [2/4] Transform  post / page 를 인덱스 도큐먼트로 변환 (post → page 순서)
    [3/4] Clear      인덱스 전체 삭제 (--no-clear 시 생략)
    [4/4] Upload     청크 단위 벌크 upsert, 모든 청크 동시 전송

실패 정책: 첫 실패에서 중단, 재시도 없음.
    - Clear 실패 → ClearFailedError (업로드 시도 안 함)
    - 청크 하나라도 실패 → UploadChunkFailedError
    - 설정 오류(알 수 없는 필터 등) → FilterError
    - 콘텐츠 DB 읽기 실패 → ContentLoadError
"""

from __future__ import annotations

import asyncio
import logging
import time
from contextlib import nullcontext
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from .config import Config
from .data import split_into_chunks
from .errors import ClearFailedError, UploadChunkFailedError
from .failures import AsyncFailureLogger
from .indexer import SearchIndex
from .log import SyncEvent, get_logger, setup_logging
from .source import ContentSource, JsonContentStore
from .transform import prepare_contents

console = Console()
logger = get_logger(name="pipeline")

ChunkCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class SyncResult:
    posts: int = 0
    pages: int = 0
    documents: int = 0
    chunks: int = 0
    cleared: bool = False
    wall_sec: float = 0.0


async def _upload_chunk(
    chunk_id: int,
    chunk: Sequence[dict[str, Any]],
    index: SearchIndex,
    semaphore: asyncio.Semaphore | None,
    failure_logger: AsyncFailureLogger,
    total: int,
    on_chunk_done: ChunkCallback | None,
):
    async with semaphore or nullcontext():
        try:
            await index.save_objects(chunk)
        except Exception as e:
            await failure_logger.log_failure(
                chunk_id, e,
                data_info={
                    "count": len(chunk),
                    "object_ids": [doc["objectID"] for doc in chunk],
                },
            )
            raise UploadChunkFailedError(chunk_id, len(chunk), e) from e
    if on_chunk_done:
        on_chunk_done(len(chunk), total)


async def sync_contents(
    config: Config,
    source: ContentSource,
    index: SearchIndex,
    *,
    clear: bool = True,
    log: logging.Logger = logger,
    on_chunk_done: ChunkCallback | None = None,
) -> SyncResult:
    """
    한 번의 전체 재색인 실행.

    Args:
        config:        필드 스펙, chunk_size, workers, failure_log_path
        source:        콘텐츠 소스 (generate / load / model)
        index:         원격 검색 인덱스 (clear_objects / save_objects)
        clear:         False면 업로드 전 인덱스 삭제를 생략
        log:           로거 (테스트에서 주입 가능)
        on_chunk_done: 청크 업로드 성공마다 (청크 크기, 전체 도큐먼트 수)로 호출

    Returns:
        SyncResult — posts는 인덱싱된 post 수

    Raises:
        ClearFailedError, UploadChunkFailedError, FilterError,
        GenerateFailedError, ContentLoadError
    """
    start = time.perf_counter()

    # [1/4] Fetch
    log.info("[1/4] 콘텐츠 로드")
    await source.generate()
    await source.load()

    posts = source.model("Post").find({"published": True}).sort("date", "asc").to_list()
    if not posts:
        log.info("인덱싱할 post가 없습니다.", extra=SyncEvent.NO_POSTS.extra())
        return SyncResult(wall_sec=time.perf_counter() - start)

    pages = source.model("Page").find({}).sort("date", "asc").to_list()

    # [2/4] Transform
    log.info(f"[2/4] 변환 (posts={len(posts):,}, pages={len(pages):,})")
    post_docs = prepare_contents(
        posts, config.post_selection.basic, config.post_selection.filtered, log=log
    )
    page_docs = prepare_contents(
        pages, config.page_selection.basic, config.page_selection.filtered, log=log
    )
    documents = post_docs + page_docs

    # [3/4] Clear
    if clear:
        log.info(
            f"[3/4] 인덱스 초기화: {index.index_name}",
            extra=SyncEvent.CLEAR_START.extra(),
        )
        try:
            await index.clear_objects()
        except Exception as e:
            log.error(
                f"인덱스 초기화 중 오류 발생: {e}",
                extra=SyncEvent.CLEAR_FAILED.extra(),
            )
            raise ClearFailedError(f"Failed to clear index {index.index_name!r}: {e}") from e
        log.info("초기화 완료", extra=SyncEvent.CLEAR_DONE.extra())
    else:
        log.info("[3/4] 인덱스 초기화 생략 (--no-clear)")

    # [4/4] Upload
    chunks = split_into_chunks(documents, config.chunk_size)
    log.info(
        f"[4/4] 업로드 (docs={len(documents):,}, chunks={len(chunks)}, "
        f"chunk_size={config.chunk_size}, workers={config.workers or 'unbounded'})",
        extra=SyncEvent.UPLOAD_START.extra(),
    )
    semaphore = asyncio.Semaphore(config.workers) if config.workers > 0 else None
    failure_logger = AsyncFailureLogger(config.failure_log_path)
    tasks = [
        asyncio.create_task(_upload_chunk(
            cid, chunk, index, semaphore, failure_logger,
            len(documents), on_chunk_done,
        ))
        for cid, chunk in enumerate(chunks)
    ]
    try:
        await asyncio.gather(*tasks)
    except UploadChunkFailedError as e:
        # 첫 실패 시 나머지 청크 요청을 취소하고 종료까지 기다린 뒤 실패 보고
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        log.error(f"업로드 중 오류 발생: {e}", extra=SyncEvent.UPLOAD_FAILED.extra())
        raise

    log.info(f"{len(posts):,} posts indexed.", extra=SyncEvent.INDEXED.extra())
    return SyncResult(
        posts=len(posts),
        pages=len(pages),
        documents=len(documents),
        chunks=len(chunks),
        cleared=clear,
        wall_sec=time.perf_counter() - start,
    )


# ============================================================
# Rich 출력
# ============================================================
def _create_progress() -> Progress:
    return Progress(
        SpinnerColumn(),
        "[progress.description]{task.description}",
        BarColumn(bar_width=30),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def _summary_table(title: str, rows: list[tuple[str, str]]) -> Table:
    table = Table(title=title, show_header=False, border_style="dim")
    table.add_column("항목", style="bold")
    table.add_column("값", justify="right", style="cyan")
    for label, value in rows:
        table.add_row(label, value)
    return table


def _build_summary_rows(config: Config, result: SyncResult) -> list[tuple[str, str]]:
    return [
        ("인덱스", config.index_name),
        ("posts", f"{result.posts:,}"),
        ("pages", f"{result.pages:,}"),
        ("도큐먼트 수", f"{result.documents:,}"),
        ("청크 수", f"{result.chunks:,}"),
        ("초기화", "예" if result.cleared else "아니오"),
        ("Wall time", f"{result.wall_sec:.1f}초"),
    ]


async def _run(config: Config, clear: bool) -> SyncResult:
    source = JsonContentStore(config.db_path, config.generate_command)
    index = SearchIndex.from_config(config)
    progress = _create_progress()
    task_id = progress.add_task("Uploading", total=None)

    def on_chunk_done(count: int, total: int):
        progress.update(task_id, advance=count, total=total)

    try:
        with progress:
            return await sync_contents(
                config, source, index, clear=clear, on_chunk_done=on_chunk_done
            )
    finally:
        await index.close()


# ============================================================
# Public API — 동기 래퍼
# ============================================================
def run_sync(config: Config, *, clear: bool = True, log_dir: Path | None = None) -> SyncResult:
    """콘솔용 실행: 로깅 설정 + Rich 패널/프로그레스/요약 테이블"""
    log_file = None
    if log_dir is not None:
        log_file = log_dir / f"sync_{time.strftime('%Y%m%d_%H%M%S')}.log"
    setup_logging(log_file=log_file)
    logger.info(f"config: {config}")

    mode = "인덱스 초기화 + 전체 업로드" if clear else "초기화 없이 upsert"
    console.print(Panel.fit(f"[bold]검색 인덱스 동기화[/] — {mode}", border_style="green"))

    result = asyncio.run(_run(config, clear))

    if result.posts:
        rows = _build_summary_rows(config, result)
        console.print(_summary_table("결과 요약", rows))
        for label, value in rows:
            logger.info(f"{label}: {value}")
    return result
