"""필드 값 변환 필터 레지스트리

필드 스펙 "content:strip:truncate,0,200" 의 각 단계가 여기 등록된 함수로
실행된다. 필터는 순수 함수: (value, *args) -> value.

    from site_search_sync.filters import default_registry

    default_registry.apply("<b>hi</b>", [FilterStep("strip")])  # → "hi"
"""

from __future__ import annotations

import warnings
from enum import Enum
from typing import Any, Callable, Iterable, TYPE_CHECKING

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning

from .errors import FilterArgumentError, UnknownFilterError

if TYPE_CHECKING:
    from .fields import FilterStep

FilterFn = Callable[..., Any]


class FilterKind(str, Enum):
    """기본 제공 필터"""

    STRIP = "strip"
    TRUNCATE = "truncate"


def strip(value: Any) -> str:
    """
    HTML 태그 제거 후 plain text 반환.

    엔티티는 디코딩하되 꺾쇠는 다시 이스케이프한다. 본문 안의 이스케이프된 코드
    ("&lt;script&gt;")가 결과에서 실제 태그로 바뀌지 않는다.
    """
    if value is None:
        return ""
    with warnings.catch_warnings():
        # URL/파일명처럼 보이는 짧은 텍스트도 그대로 파싱
        warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
        text = BeautifulSoup(str(value), "html.parser").get_text()
    return text.replace("<", "&lt;").replace(">", "&gt;")


def _to_int(arg: Any, label: str) -> int:
    try:
        return int(arg)
    except (TypeError, ValueError) as e:
        raise FilterArgumentError(
            f"truncate: {label} must be an integer, got {arg!r}"
        ) from e


def truncate(value: Any, start: Any = 0, length: Any = None) -> str:
    """
    start 위치부터 length 글자를 잘라냄.

    두 번째 인자는 끝 위치가 아니라 **길이**:
        truncate("hello", 0, 2) → "he"
        truncate("hello", 1, 3) → "ell"

    음수 start는 뒤에서부터 센다. length 생략 시 끝까지, 0 이하이면 "".
    """
    text = "" if value is None else str(value)
    begin = _to_int(start, "start")
    if begin < 0:
        begin = max(len(text) + begin, 0)
    if length is None:
        return text[begin:]
    size = _to_int(length, "length")
    if size <= 0:
        return ""
    return text[begin:begin + size]


class FilterRegistry:
    """필터 이름 → 함수 매핑. 없는 이름은 실행 시점에 UnknownFilterError."""

    def __init__(self, filters: dict[str, FilterFn] | None = None):
        self._filters: dict[str, FilterFn] = dict(filters or {})

    def register(self, name: str, fn: FilterFn) -> None:
        self._filters[name] = fn

    def get(self, name: str) -> FilterFn:
        try:
            return self._filters[name]
        except KeyError:
            raise UnknownFilterError(name) from None

    def __contains__(self, name: str) -> bool:
        return name in self._filters

    def names(self) -> list[str]:
        return list(self._filters)

    def apply(self, value: Any, steps: Iterable[FilterStep]) -> Any:
        """왼쪽부터 순서대로 적용. 각 단계는 이전 결과를 첫 인자로 받는다."""
        for step in steps:
            value = self.get(step.name)(value, *step.args)
        return value


def build_default_registry() -> FilterRegistry:
    return FilterRegistry({
        FilterKind.STRIP.value: strip,
        FilterKind.TRUNCATE.value: truncate,
    })


default_registry = build_default_registry()
