from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from site_search_sync.source import ContentQuery


class FakeModel:
    def __init__(self, records):
        self.records = records
        self.predicates = []

    def find(self, predicate):
        self.predicates.append(predicate)
        return ContentQuery([
            r for r in self.records
            if all(r.get(k) == v for k, v in predicate.items())
        ])


class FakeSource:
    """호스트 파이프라인 대역 — generate/load 호출 여부를 기록"""

    def __init__(self, posts: list[dict[str, Any]], pages: list[dict[str, Any]]):
        self.models = {"Post": FakeModel(posts), "Page": FakeModel(pages)}
        self.generate = AsyncMock()
        self.load = AsyncMock()

    def model(self, name):
        return self.models[name]


def make_post(i: int, **extra) -> dict[str, Any]:
    post = {
        "_id": f"post-{i}",
        "title": f"Post {i}",
        "date": f"2024-01-{i:02d}",
        "published": True,
        "content": f"<p>body {i}</p>",
        "tags": {"data": [{"name": "python", "_id": "t1"}]},
    }
    post.update(extra)
    return post


@pytest.fixture
def fake_index():
    index = MagicMock()
    index.index_name = "site"
    index.clear_objects = AsyncMock()
    index.save_objects = AsyncMock(side_effect=lambda docs: len(docs))
    return index
