"""Per-request ids and access logging."""

import re
import time
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from quotevault.utils.logger import get_logger, log_context, request_id_var
from quotevault.utils.text import new_object_id

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
# Client supplied ids are echoed back only when they look harmless
CLIENT_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Tag each request with an id and log its outcome.

    Failed requests are logged at INFO; successful ones at DEBUG unless they
    take longer than ``slow_request_seconds``.
    """

    def __init__(self, app: Any, slow_request_seconds: float = 1.0):
        super().__init__(app)
        self.slow_request_seconds = slow_request_seconds

    async def dispatch(self, request: Request, call_next: Any) -> Response:
        supplied = request.headers.get(REQUEST_ID_HEADER, "")
        request_id = supplied if CLIENT_ID_PATTERN.match(supplied) else new_object_id()
        token = request_id_var.set(request_id)
        start = time.perf_counter()

        try:
            response = await call_next(request)
            elapsed = time.perf_counter() - start

            fields = log_context(
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round(elapsed * 1000, 1),
            )
            message = f"{request.method} {request.url.path} - {response.status_code}"
            if response.status_code >= 400 or elapsed > self.slow_request_seconds:
                logger.info(message, extra=fields)
            else:
                logger.debug(message, extra=fields)

            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            request_id_var.reset(token)
