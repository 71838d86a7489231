"""콘텐츠 레코드 → 검색 인덱스 도큐먼트 변환"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Sequence

from .fields import ParsedFieldSpec, parse_field_spec
from .filters import FilterRegistry, default_registry
from .log import SyncEvent, get_logger

logger = get_logger(name="transform")

TAXONOMY_FIELDS = ("tags", "categories")


def pick(record: Mapping[str, Any], attributes: Iterable[str]) -> dict[str, Any]:
    """record에 실제로 존재하는 attribute만 복사"""
    return {attr: record[attr] for attr in attributes if attr in record}


def _term_names(relation: Any) -> list[str]:
    # 호스트 스토어는 {"data": [term, ...]} 형태, 평범한 리스트도 허용
    terms = relation.get("data", []) if isinstance(relation, Mapping) else relation
    return [term["name"] for term in terms or ()]


def prepare_contents(
    contents: Sequence[Mapping[str, Any]],
    fields: Sequence[str],
    fields_with_filters: Sequence[ParsedFieldSpec | str] = (),
    *,
    registry: FilterRegistry = default_registry,
    log: logging.Logger = logger,
) -> list[dict[str, Any]]:
    """
    레코드마다 인덱스 도큐먼트 1개 생성 (입력 순서 유지).

    1. fields 중 레코드에 있는 필드만 복사
    2. objectID = record["_id"] (같은 이름의 선택 필드는 덮어씀)
    3. tags / categories 는 term 이름 리스트로 치환
    4. 필터 스펙마다 필터 체인 적용 → "contentStripTruncate" 같은 키에 저장.
       레코드에 필드가 없으면 경고만 남기고 해당 스펙을 건너뜀.

    Raises:
        UnknownFilterError: 등록되지 않은 필터 이름
        FilterArgumentError: 필터 인자 변환 실패
    """
    specs = [
        parse_field_spec(s) if isinstance(s, str) else s
        for s in fields_with_filters
    ]
    taxonomy_fields = [f for f in TAXONOMY_FIELDS if f in fields]

    documents = []
    for record in contents:
        doc = pick(record, fields)
        doc["objectID"] = record["_id"]

        for name in taxonomy_fields:
            if name in record:
                doc[name] = _term_names(record[name])

        for spec in specs:
            if spec.field_name not in record:
                log.warning(
                    f'"{record.get("title")}" has no "{spec.field_name}" field.',
                    extra=SyncEvent.MISSING_FIELD.extra(),
                )
                continue
            doc[spec.indexed_name] = registry.apply(record[spec.field_name], spec.filters)

        documents.append(doc)

    return documents
