"""Request id of the exchange currently being handled.

Set by :class:`~jsonenvelope.middleware.request_id.RequestIdMiddleware`, read
when stamping ``Envelope.id`` and when tagging log records.
"""
from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

_request_id: ContextVar[str | None] = ContextVar("jsonenvelope_request_id", default=None)


def current_request_id() -> str | None:
    return _request_id.get()


@contextmanager
def bound_request_id(request_id: str) -> Iterator[str]:
    """Make ``request_id`` current for the enclosed block."""
    token = _request_id.set(request_id)
    try:
        yield request_id
    finally:
        _request_id.reset(token)
