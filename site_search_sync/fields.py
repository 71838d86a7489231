"""필드 스펙 파서

필드 스펙 문자열:
    "title"                          → 그대로 복사되는 필드
    "content:strip:truncate,0,200"   → content 값에 strip → truncate(0, 200) 적용,
                                       결과는 "contentStripTruncate" 키에 저장

파싱은 설정 로드 시 한 번만 수행 (FieldSelection.from_specs).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

FILTER_DELIMITER = ":"
ARG_DELIMITER = ","


@dataclass(frozen=True)
class FilterStep:
    name: str
    args: tuple[str, ...] = ()


@dataclass(frozen=True)
class ParsedFieldSpec:
    field_name: str
    filters: tuple[FilterStep, ...] = ()

    @property
    def indexed_name(self) -> str:
        """기본 필드명 + 필터명(첫 글자 대문자)을 적용 순서대로 연결"""
        return self.field_name + "".join(upper_first(f.name) for f in self.filters)


def upper_first(text: str) -> str:
    """첫 글자만 대문자로 (나머지는 그대로)"""
    return text[:1].upper() + text[1:]


def get_basic_fields(fields: Sequence[str]) -> list[str]:
    """필터가 없는 필드 스펙만 (순서 유지)"""
    return [f for f in fields if FILTER_DELIMITER not in f]


def get_fields_with_filters(fields: Sequence[str]) -> list[str]:
    """필터가 있는 필드 스펙만 (순서 유지)"""
    return [f for f in fields if FILTER_DELIMITER in f]


def parse_field_spec(spec: str) -> ParsedFieldSpec:
    field_name, *segments = spec.split(FILTER_DELIMITER)
    steps = []
    for segment in segments:
        name, *args = segment.split(ARG_DELIMITER)
        steps.append(FilterStep(name, tuple(args)))
    return ParsedFieldSpec(field_name, tuple(steps))


@dataclass(frozen=True)
class FieldSelection:
    """한 콘텐츠 타입(post/page)에 대한 파싱 완료된 필드 선택"""

    basic: tuple[str, ...] = ()
    filtered: tuple[ParsedFieldSpec, ...] = ()

    @classmethod
    def from_specs(cls, specs: Sequence[str]) -> FieldSelection:
        return cls(
            basic=tuple(get_basic_fields(specs)),
            filtered=tuple(parse_field_spec(s) for s in get_fields_with_filters(specs)),
        )
