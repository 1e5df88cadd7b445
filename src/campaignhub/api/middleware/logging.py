"""Request logging middleware."""

import time
from collections.abc import Callable
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from campaignhub.core.logging import bind_contextvars, clear_contextvars, get_logger

REQUEST_ID_HEADER = "X-Request-ID"

logger = get_logger("campaignhub.api.requests")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Assigns a request id and logs every HTTP request with its outcome.

    The request id is bound to the structlog context, so storage and
    service events logged while handling the request carry it too.

    Sets:
        request.state.request_id: Incoming X-Request-ID or a new UUID
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and log request/response."""
        start_time = time.perf_counter()
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id

        clear_contextvars()
        bind_contextvars(request_id=request_id)
        try:
            response = await call_next(request)
            duration_ms = (time.perf_counter() - start_time) * 1000
            self._log_request(request, response, duration_ms)
        finally:
            clear_contextvars()

        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    def _log_request(self, request: Request, response: Response, duration_ms: float) -> None:
        """Log the completed request at a level matching its status."""
        principal = getattr(request.state, "principal", None)
        log_data = {
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round(duration_ms, 2),
            "user_id": principal.subject if principal else None,
            "client_ip": request.client.host if request.client else None,
        }

        if response.status_code >= 500:
            logger.error("Request failed", **log_data)
        elif response.status_code >= 400:
            logger.warning("Request rejected", **log_data)
        else:
            logger.info("Request completed", **log_data)
