"""Binding between envelopes and byte streams or HTTP messages.

The envelope itself only knows bytes; these helpers read a whole body from a
stream, an ``httpx.Response`` or a starlette ``Request`` and write the
encoded envelope back out.
"""
from __future__ import annotations

import logging
from typing import BinaryIO, Iterable, Mapping

import httpx
from starlette.requests import Request
from starlette.responses import Response

from jsonenvelope.core.config import settings
from jsonenvelope.core.errors import DecodingError
from jsonenvelope.core.request_context import current_request_id
from jsonenvelope.schemas.envelope import Envelope

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"
_CHUNK_SIZE = 64 * 1024


def _check_size(size: int) -> None:
    if size > settings.MAX_BODY_BYTES:
        raise DecodingError(f"body of {size} bytes exceeds limit of {settings.MAX_BODY_BYTES}")


def _decode_body(body: bytes) -> Envelope:
    _check_size(len(body))
    try:
        return Envelope.deserialize(body)
    except DecodingError as exc:
        logger.warning("inbound envelope rejected", extra={"detail": str(exc), "size": len(body)})
        raise


def read_envelope(stream: BinaryIO | Iterable[bytes]) -> Envelope:
    """Read every byte from ``stream`` (a binary file or an iterable of chunks) and decode it."""
    if hasattr(stream, "read"):
        chunks: Iterable[bytes] = iter(lambda: stream.read(_CHUNK_SIZE), b"")  # type: ignore[union-attr]
    else:
        chunks = stream
    body = bytearray()
    for chunk in chunks:
        body.extend(chunk)
        _check_size(len(body))
    return _decode_body(bytes(body))


def write_envelope(envelope: Envelope, sink: BinaryIO) -> int:
    """Serialize ``envelope`` into ``sink`` and return the number of bytes written."""
    payload = envelope.serialize()
    sink.write(payload)
    return len(payload)


def from_httpx_response(response: httpx.Response) -> Envelope:
    return _decode_body(response.read())


async def from_request(request: Request) -> Envelope:
    return _decode_body(await request.body())


def to_response(
    envelope: Envelope,
    status_code: int = 200,
    headers: Mapping[str, str] | None = None,
) -> Response:
    """Render ``envelope`` as a JSON response.

    When ``envelope.id`` is empty the response carries the current request
    id; ``envelope`` itself is not modified.
    """
    if not envelope.id:
        envelope = envelope.model_copy(update={"id": current_request_id() or ""})
    return Response(
        content=envelope.serialize(),
        status_code=status_code,
        headers=dict(headers) if headers else None,
        media_type=JSON_MEDIA_TYPE,
    )


__all__ = [
    "JSON_MEDIA_TYPE",
    "read_envelope",
    "write_envelope",
    "from_httpx_response",
    "from_request",
    "to_response",
]
