from __future__ import annotations

import io
import json

import httpx
import pytest

from jsonenvelope import DecodingError, Envelope
from jsonenvelope.core.config import settings
from jsonenvelope.core.request_context import bound_request_id
from jsonenvelope.transport import from_httpx_response, read_envelope, to_response, write_envelope


def _sample() -> Envelope:
    env = Envelope(api_version="0.1", method="cars.get")
    env.data.add_item({"color": "red", "type": "SUV"})
    return env


def test_write_then_read_stream():
    sink = io.BytesIO()
    written = write_envelope(_sample(), sink)
    assert written == len(sink.getvalue())

    sink.seek(0)
    decoded = read_envelope(sink)
    assert decoded.method == "cars.get"
    assert decoded.data.current_item() == {"color": "red", "type": "SUV"}


def test_read_envelope_from_chunks():
    payload = _sample().serialize()
    chunks = [payload[:5], payload[5:20], payload[20:]]
    assert read_envelope(chunks).api_version == "0.1"


def test_read_envelope_enforces_size_limit(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(settings, "MAX_BODY_BYTES", 8)
    with pytest.raises(DecodingError) as info:
        read_envelope(io.BytesIO(_sample().serialize()))
    assert "exceeds limit" in str(info.value)


def test_from_httpx_response():
    response = httpx.Response(200, content=_sample().serialize())
    decoded = from_httpx_response(response)
    assert decoded.data.item_count() == 1


def test_from_httpx_response_malformed():
    response = httpx.Response(502, content=b"<html>bad gateway</html>")
    with pytest.raises(DecodingError):
        from_httpx_response(response)


def test_to_response_stamps_request_id():
    with bound_request_id("req-42"):
        response = to_response(_sample(), status_code=201, headers={"X-Extra": "1"})
    assert response.status_code == 201
    assert response.media_type == "application/json"
    assert response.headers["X-Extra"] == "1"
    body = json.loads(response.body)
    assert body["id"] == "req-42"


def test_to_response_keeps_caller_id():
    env = _sample()
    env.id = "mine"
    with bound_request_id("req-42"):
        response = to_response(env)
    assert json.loads(response.body)["id"] == "mine"


def test_to_response_leaves_template_untouched():
    template = Envelope(api_version="0.1")
    with bound_request_id("first"):
        first = to_response(template)
    with bound_request_id("second"):
        second = to_response(template)
    assert template.id == ""
    assert json.loads(first.body)["id"] == "first"
    assert json.loads(second.body)["id"] == "second"
