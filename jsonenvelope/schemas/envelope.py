from __future__ import annotations

import logging

from pydantic import Field, ValidationError
from pydantic_core import PydanticSerializationError

from jsonenvelope.core.config import settings
from jsonenvelope.core.errors import DecodingError, EncodingError
from jsonenvelope.schemas.base import OmitEmptyModel
from jsonenvelope.schemas.data import DataPayload
from jsonenvelope.schemas.error import ErrorPayload

logger = logging.getLogger(__name__)


def _describe(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    if location:
        return f"malformed envelope at {location}: {first['msg']}"
    return f"malformed envelope: {first['msg']}"


class Envelope(OmitEmptyModel):
    """Top level JSON object: request metadata, a data section and an error section.

    A well formed envelope fills at most one of ``data`` and ``error``; this
    is left to the caller (see :meth:`has_data` and :meth:`has_error`).
    """

    api_version: str = ""
    context: str = Field("", description="Value supplied by the client and echoed back")
    id: str = Field("", description="Identifier of the request")
    method: str = Field("", description="Operation performed, e.g. cars.get")
    params: dict[str, str] = Field(default_factory=dict)
    data: DataPayload = Field(default_factory=DataPayload)
    error: ErrorPayload = Field(default_factory=ErrorPayload)

    def copy_metadata(self) -> Envelope:
        """New envelope with this one's api version, method and params; data and error empty."""
        return Envelope(api_version=self.api_version, method=self.method, params=dict(self.params))

    def has_data(self) -> bool:
        return not self.data.is_empty()

    def has_error(self) -> bool:
        return not self.error.is_empty()

    def serialize(self) -> bytes:
        """Encode the envelope to JSON bytes, refreshing the data item count first."""
        self.data.set_item_count()
        try:
            text = self.model_dump_json(by_alias=True, indent=settings.ENVELOPE_JSON_INDENT)
        except PydanticSerializationError as exc:
            logger.debug("envelope encoding failed", extra={"method": self.method})
            raise EncodingError(f"cannot encode envelope: {exc}") from exc
        return text.encode("utf-8")

    @classmethod
    def deserialize(cls, raw: bytes | str) -> Envelope:
        try:
            return cls.model_validate_json(raw)
        except ValidationError as exc:
            logger.debug("envelope decoding failed", extra={"error_count": exc.error_count()})
            raise DecodingError(_describe(exc)) from exc
