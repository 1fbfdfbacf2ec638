"""
Request ID middleware for request correlation.

- Accepts X-Request-ID from the client or generates one
- Echoes it on the response and exposes it to logging via a context var
- Logs each request's outcome, warning when it was slow
"""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from portfolio_api.config import get_settings
from portfolio_api.logging_config import get_logger, request_id_var

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Assign a request ID to every request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)

        try:
            start = time.perf_counter()
            response = await call_next(request)
            duration_ms = round((time.perf_counter() - start) * 1000, 1)
            response.headers[REQUEST_ID_HEADER] = request_id

            fields = {
                "path": request.url.path,
                "method": request.method,
                "status": response.status_code,
                "duration_ms": duration_ms,
            }
            if duration_ms > get_settings().slow_request_ms:
                logger.warning("Slow request", extra=fields)
            else:
                logger.debug("Request handled", extra=fields)
            return response
        finally:
            request_id_var.reset(token)
