from __future__ import annotations

from jsonenvelope import DataPayload


def test_empty_fields_decode_to_empty_list():
    data = DataPayload()
    assert data.fields == ""
    assert data.get_fields() == []


def test_add_fields_appends_in_order():
    data = DataPayload(fields="x")
    data.add_fields("a", "b")
    assert data.fields == "x,a,b"
    assert data.get_fields() == ["x", "a", "b"]


def test_add_fields_keeps_duplicates():
    data = DataPayload()
    data.add_fields("color")
    data.add_fields("color")
    assert data.get_fields() == ["color", "color"]


def test_add_no_fields_is_noop():
    data = DataPayload()
    data.add_fields()
    assert data.fields == ""
    data.add_fields("kind")
    data.add_fields()
    assert data.get_fields() == ["kind"]
