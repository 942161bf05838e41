from __future__ import annotations

import time
import uuid
import logging
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from jsonenvelope.core.config import settings
from jsonenvelope.core.request_context import bound_request_id


logger = logging.getLogger(__name__)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tags each request with an id taken from the request header or generated."""

    async def dispatch(self, request: Request, call_next: Callable):  # type: ignore[no-untyped-def]
        header = settings.REQUEST_ID_HEADER
        req_id = request.headers.get(header) or uuid.uuid4().hex
        start = time.perf_counter()
        with bound_request_id(req_id):
            response = await call_next(request)
            response.headers[header] = req_id
            logger.debug(
                "request handled",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status": response.status_code,
                    "duration_ms": round((time.perf_counter() - start) * 1000, 2),
                },
            )
            return response
