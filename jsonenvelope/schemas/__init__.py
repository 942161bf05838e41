"""Pydantic models for the envelope and its sections."""

from .data import DataPayload  # noqa: F401
from .envelope import Envelope  # noqa: F401
from .error import ErrorDetail, ErrorPayload  # noqa: F401
