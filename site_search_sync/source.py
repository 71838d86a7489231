"""콘텐츠 소스 (호스트 사이트 생성 파이프라인과의 경계)

동기화는 아래 인터페이스만 사용한다:
    await source.generate()
    await source.load()
    source.model("Post").find({"published": True}).sort("date", "asc").to_list()

JsonContentStore는 {"Post": [...], "Page": [...]} 형태의 JSON 덤프를 읽는 기본 구현.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Mapping, Protocol, Sequence

from .errors import ContentLoadError, GenerateFailedError
from .log import get_logger

logger = get_logger(name="source")

Record = Mapping[str, Any]


class ContentModel(Protocol):
    def find(self, predicate: Mapping[str, Any]) -> "ContentQuery": ...


class ContentSource(Protocol):
    """sync_contents가 기대하는 최소 인터페이스 (duck typing)."""

    async def generate(self) -> None: ...

    async def load(self) -> None: ...

    def model(self, name: str) -> ContentModel: ...


class ContentQuery:
    """불변 쿼리 결과. sort()는 새 ContentQuery를 반환."""

    def __init__(self, records: Sequence[Record]):
        self._records = list(records)

    def sort(self, field: str, direction: str | int = "asc") -> ContentQuery:
        if direction in ("asc", 1):
            reverse = False
        elif direction in ("desc", -1):
            reverse = True
        else:
            raise ValueError(f"sort direction must be asc/desc/1/-1, got {direction!r}")
        # 정렬 키가 없는 레코드는 항상 뒤로
        present = [r for r in self._records if r.get(field) is not None]
        missing = [r for r in self._records if r.get(field) is None]
        present.sort(key=lambda r: r[field], reverse=reverse)
        return ContentQuery(present + missing)

    def to_list(self) -> list[Record]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)


class _JsonModel:
    def __init__(self, records: Sequence[Record]):
        self._records = records

    def find(self, predicate: Mapping[str, Any]) -> ContentQuery:
        return ContentQuery([
            r for r in self._records
            if all(k in r and r[k] == v for k, v in predicate.items())
        ])


class JsonContentStore:
    """
    JSON 덤프 기반 콘텐츠 스토어.

    Args:
        db_path:          {"Post": [...], "Page": [...]} JSON 파일
        generate_command: generate() 시 실행할 명령 (None이면 no-op)
    """

    def __init__(
        self,
        db_path: Path,
        generate_command: Sequence[str] | None = None,
        log: logging.Logger = logger,
    ):
        self.db_path = Path(db_path)
        self.generate_command = list(generate_command) if generate_command else None
        self._log = log
        self._models: dict[str, list[Record]] | None = None

    async def generate(self) -> None:
        if not self.generate_command:
            return
        self._log.info(f"사이트 생성: {' '.join(self.generate_command)}")
        try:
            proc = await asyncio.create_subprocess_exec(
                *self.generate_command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as e:
            raise GenerateFailedError(f"{self.generate_command[0]}: cannot run ({e})") from e
        output, _ = await proc.communicate()
        if proc.returncode != 0:
            tail = output.decode("utf-8", errors="replace").strip()[-500:]
            raise GenerateFailedError(
                f"{self.generate_command[0]} exited with {proc.returncode}: {tail}"
            )

    async def load(self) -> None:
        try:
            raw = json.loads(self.db_path.read_text(encoding="utf-8"))
        except OSError as e:
            raise ContentLoadError(f"{self.db_path}: cannot read ({e})") from e
        except json.JSONDecodeError as e:
            raise ContentLoadError(f"{self.db_path}: invalid JSON ({e})") from e
        if not isinstance(raw, dict):
            raise ContentLoadError(f"{self.db_path}: expected a JSON object")
        models = raw.get("models", raw)
        self._models = {name: list(records) for name, records in models.items()}
        counts = ", ".join(f"{k}={len(v):,}" for k, v in self._models.items())
        self._log.info(f"{self.db_path.name} 로드 완료 ({counts})")

    def model(self, name: str) -> _JsonModel:
        if self._models is None:
            raise RuntimeError("load() must be awaited before model()")
        return _JsonModel(self._models.get(name, []))
