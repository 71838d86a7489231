#!/usr/bin/env python3
# index_site.py
"""
사이트 콘텐츠 → Elasticsearch 검색 인덱스 동기화 (CLI 엔트리포인트)

실행:
  # 설정 파일 + 인덱스 초기화 후 전체 업로드
  python index_site.py --config search.json

  # 초기화 없이 upsert만
  python index_site.py --config search.json -n

  # 설정 파일 없이
  python index_site.py --db public/db.json --index blog --chunk_size 1000

환경변수 (설정 파일보다 우선):
  SITE_SEARCH_ES_URL, SITE_SEARCH_API_KEY, SITE_SEARCH_INDEX_NAME, SITE_SEARCH_CHUNK_SIZE
"""

import argparse
import sys
from pathlib import Path

from site_search_sync import Config, SyncError, get_logger, run_sync, setup_logging

logger = get_logger(name="cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="사이트 콘텐츠 → Elasticsearch (clear + chunked bulk upsert)"
    )
    parser.add_argument("--config", type=Path, default=None, help="JSON 설정 파일")
    parser.add_argument(
        "-n", "--no-clear", dest="clear", action="store_false",
        help="업로드 전 인덱스 초기화를 생략",
    )

    # ── 설정 파일 값 덮어쓰기 ──
    overrides = parser.add_argument_group("설정 덮어쓰기")
    overrides.add_argument("--db", type=Path, default=None, help="콘텐츠 JSON 덤프 경로")
    overrides.add_argument("--index", default=None, help="인덱스 이름")
    overrides.add_argument("--chunk_size", type=int, default=None, help="청크당 도큐먼트 수 (default: 5000)")
    overrides.add_argument("--es_url", default=None)
    overrides.add_argument(
        "--workers", type=int, default=None,
        help="동시 업로드 청크 수 상한 (0=제한 없음)",
    )
    overrides.add_argument(
        "--failure_log", type=Path, default=None,
        help="실패 청크 JSONL 파일 경로 (미지정 시 기록 안 함)",
    )

    parser.add_argument("--log_dir", type=Path, default=None, help="로그 파일 디렉토리")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()

    overrides = {
        "db_path": args.db,
        "index_name": args.index,
        "chunk_size": args.chunk_size,
        "es_url": args.es_url,
        "workers": args.workers,
        "failure_log_path": args.failure_log,
    }
    try:
        if args.config:
            config = Config.from_file(args.config, **overrides)
        else:
            config = Config(**{k: v for k, v in overrides.items() if v is not None}).with_env()
        run_sync(config, clear=args.clear, log_dir=args.log_dir)
    except SyncError as e:
        logger.error(f"[bold red]동기화 실패[/bold red]: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
