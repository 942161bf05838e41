from __future__ import annotations

from pydantic import Field

from jsonenvelope.schemas.base import OmitEmptyModel


class ErrorDetail(OmitEmptyModel):
    """One entry of ``error.errors``."""

    message: str = ""
    location: str = Field("", description="Path of the field implicated in the error")
    location_type: str = Field("", description="What kind of location `location` names")
    extended_helper: str = Field("", description="URL with further help")
    domain: str = ""
    reason: str = ""
    send_report: str = Field("", description="URL for reporting the error")


class ErrorPayload(OmitEmptyModel):
    """Error section of an envelope."""

    code: int = 0
    message: str = ""
    errors: list[ErrorDetail] = Field(default_factory=list)

    def add_error(self, **detail: str) -> ErrorDetail:
        """Append a detail record built from keyword fields and return it."""
        item = ErrorDetail(**detail)
        self.errors.append(item)
        return item
