import copy
import logging

import pytest

from site_search_sync.errors import UnknownFilterError
from site_search_sync.fields import parse_field_spec
from site_search_sync.filters import build_default_registry
from site_search_sync.log import SyncEvent
from site_search_sync.transform import pick, prepare_contents


def _record(**fields):
    base = {"_id": "abc", "title": "Hello"}
    base.update(fields)
    return base


def test_pick_only_present_attributes():
    assert pick({"a": 1, "b": None}, ["a", "b", "c"]) == {"a": 1, "b": None}


def test_object_id_from_record_id():
    [doc] = prepare_contents([_record()], ["title"])
    assert doc == {"title": "Hello", "objectID": "abc"}


def test_object_id_overrides_selected_field():
    [doc] = prepare_contents([_record(objectID="other")], ["objectID", "title"])
    assert doc["objectID"] == "abc"


def test_absent_plain_field_is_omitted():
    [doc] = prepare_contents([_record()], ["title", "excerpt"])
    assert "excerpt" not in doc


def test_taxonomy_names_in_order():
    record = _record(
        tags={"data": [{"name": "python", "_id": 1}, {"name": "search", "_id": 2}]},
        categories={"data": [{"name": "dev", "slug": "dev"}]},
    )
    [doc] = prepare_contents([record], ["tags", "categories"])
    assert doc["tags"] == ["python", "search"]
    assert doc["categories"] == ["dev"]


def test_taxonomy_plain_sequence():
    [doc] = prepare_contents([_record(tags=[{"name": "a"}, {"name": "b"}])], ["tags"])
    assert doc["tags"] == ["a", "b"]


def test_taxonomy_not_selected_is_not_copied():
    [doc] = prepare_contents([_record(tags={"data": [{"name": "a"}]})], ["title"])
    assert "tags" not in doc


def test_strip_filter():
    [doc] = prepare_contents([_record(content="<b>hi</b>")], [], ["content:strip"])
    assert doc["contentStrip"] == "hi"


def test_truncate_filter_uses_length():
    [doc] = prepare_contents([_record(content="hello")], [], ["content:truncate,0,2"])
    assert doc["contentTruncate"] == "he"


def test_filter_chain_key_and_value():
    specs = [parse_field_spec("content:strip:truncate,0,5")]
    [doc] = prepare_contents([_record(content="<p>hello world</p>")], ["title"], specs)
    assert doc["contentStripTruncate"] == "hello"
    assert "content" not in doc


def test_missing_filtered_field_warns_and_continues(caplog):
    records = [_record(_id="1", title="No body"), _record(_id="2", content="<i>x</i>")]
    with caplog.at_level(logging.WARNING):
        docs = prepare_contents(records, ["title"], ["content:strip"])

    assert len(docs) == 2
    assert "contentStrip" not in docs[0]
    assert docs[1]["contentStrip"] == "x"

    [warning] = [r for r in caplog.records if getattr(r, "event", None) == SyncEvent.MISSING_FIELD]
    assert "No body" in warning.getMessage()
    assert "content" in warning.getMessage()


def test_explicit_logger_receives_warning():
    log = logging.getLogger("test.transform.explicit")
    records = []

    class _Capture(logging.Handler):
        def emit(self, record):
            records.append(record)

    handler = _Capture()
    log.addHandler(handler)
    try:
        prepare_contents([_record()], [], ["content:strip"], log=log)
    finally:
        log.removeHandler(handler)
    assert [r.event for r in records] == ["missing_field"]


def test_unknown_filter_raises():
    with pytest.raises(UnknownFilterError):
        prepare_contents([_record(content="x")], [], ["content:shout"])


def test_unknown_filter_on_missing_field_is_skipped():
    docs = prepare_contents([_record()], [], ["content:shout"])
    assert docs == [{"objectID": "abc"}]


def test_custom_registry():
    registry = build_default_registry()
    registry.register("upper", lambda v: v.upper())
    [doc] = prepare_contents([_record(content="hi")], [], ["content:upper"], registry=registry)
    assert doc["contentUpper"] == "HI"


def test_input_records_not_mutated():
    record = _record(content="<b>hi</b>", tags={"data": [{"name": "a"}]})
    before = copy.deepcopy(record)
    prepare_contents([record], ["tags", "title"], ["content:strip"])
    assert record == before


def test_output_order_matches_input():
    records = [_record(_id=str(i)) for i in range(5)]
    docs = prepare_contents(records, ["title"])
    assert [d["objectID"] for d in docs] == ["0", "1", "2", "3", "4"]
