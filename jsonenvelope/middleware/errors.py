from __future__ import annotations

import logging
from typing import Any, Iterable

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from jsonenvelope.core.errors import DecodingError
from jsonenvelope.schemas.envelope import Envelope
from jsonenvelope.schemas.error import ErrorDetail
from jsonenvelope.transport import to_response

logger = logging.getLogger(__name__)


def error_envelope(
    code: int,
    message: str,
    details: Iterable[ErrorDetail] = (),
    template: Envelope | None = None,
) -> Envelope:
    """Build an envelope carrying only an error section, stamped from ``template`` if given."""
    envelope = template.copy_metadata() if template is not None else Envelope()
    envelope.error.code = code
    envelope.error.message = message
    envelope.error.errors.extend(details)
    return envelope


def _validation_details(errors: Iterable[dict[str, Any]]) -> list[ErrorDetail]:
    details = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ())]
        details.append(
            ErrorDetail(
                message=str(err.get("msg", "")),
                location=".".join(loc[1:]) or ".".join(loc),
                location_type=loc[0] if loc else "",
                reason=str(err.get("type", "")),
            )
        )
    return details


def register_exception_handlers(app: FastAPI, template: Envelope | None = None) -> None:
    """Register handlers that render failures as error envelopes."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
        logger.warning("HTTP exception", extra={"path": request.url.path, "detail": exc.detail})
        envelope = error_envelope(exc.status_code, str(exc.detail), template=template)
        return to_response(envelope, status_code=exc.status_code, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> Response:
        logger.warning("validation error", extra={"path": request.url.path, "errors": exc.errors()})
        envelope = error_envelope(422, "validation_error", _validation_details(exc.errors()), template=template)
        return to_response(envelope, status_code=422)

    @app.exception_handler(DecodingError)
    async def decoding_exception_handler(request: Request, exc: DecodingError) -> Response:
        detail = ErrorDetail(message=str(exc), reason="parseError", location_type="body")
        envelope = error_envelope(400, "parse_error", [detail], template=template)
        return to_response(envelope, status_code=400)

    @app.middleware("http")
    async def catch_unhandled_exceptions(request: Request, call_next):  # type: ignore[no-untyped-def]
        try:
            return await call_next(request)
        except Exception:
            logger.exception("unhandled exception", extra={"path": request.url.path})
            return to_response(error_envelope(500, "internal_error", template=template), status_code=500)
