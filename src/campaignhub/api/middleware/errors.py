"""Error handling middleware for mapping exceptions to HTTP responses."""

from collections.abc import Callable
from datetime import UTC, datetime

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.middleware.base import BaseHTTPMiddleware

from campaignhub.api.schemas.errors import APIError, ErrorCode
from campaignhub.config.settings import get_settings
from campaignhub.core.exceptions import AuthenticationError, ForbiddenError, NotFoundError
from campaignhub.core.logging import get_logger, log_exception
from campaignhub.db.storage.exceptions import (
    ConstraintViolationError,
    QueryValidationError,
    RecordNotFoundError,
    StorageError,
)

logger = get_logger(__name__)

# Exception to HTTP status/error code mapping, most specific first
# Format: Exception -> (status_code, error_code)
EXCEPTION_MAP: list[tuple[type[Exception], int, str]] = [
    (AuthenticationError, 401, ErrorCode.UNAUTHORIZED.value),
    (ForbiddenError, 403, ErrorCode.FORBIDDEN.value),
    (NotFoundError, 404, ErrorCode.NOT_FOUND.value),
    (RecordNotFoundError, 404, ErrorCode.NOT_FOUND.value),
    (ConstraintViolationError, 409, ErrorCode.CONFLICT.value),
    (QueryValidationError, 400, ErrorCode.INVALID_REQUEST.value),
    (ValidationError, 422, ErrorCode.VALIDATION_ERROR.value),
    (StorageError, 500, ErrorCode.INTERNAL_ERROR.value),
]


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Middleware that catches exceptions and returns standardized error responses.

    Maps domain exceptions to appropriate HTTP status codes and formats
    all errors using the APIError schema.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and handle any exceptions."""
        try:
            return await call_next(request)
        except Exception as exc:
            return self._handle_exception(request, exc)

    def _handle_exception(self, request: Request, exc: Exception) -> JSONResponse:
        """Convert exception to JSON error response."""
        request_id = str(getattr(request.state, "request_id", "unknown"))
        status_code, error_code, message, details = self._map_exception(exc)

        if status_code >= 500:
            log_exception(logger, exc, path=request.url.path, request_id=request_id)

        error = APIError(
            error_code=error_code,
            message=message,
            details=details,
            request_id=request_id,
            timestamp=datetime.now(UTC),
        )

        return JSONResponse(
            status_code=status_code,
            content=error.model_dump(mode="json"),
            headers={"X-Request-ID": request_id},
        )

    def _map_exception(self, exc: Exception) -> tuple[int, str, str, dict | None]:
        """Map exception to (status_code, error_code, message, details)."""
        # Resource lookups never reveal whether a foreign row exists
        if isinstance(exc, NotFoundError):
            return (404, ErrorCode.NOT_FOUND.value, exc.args[0], {"resource": exc.resource})

        if isinstance(exc, ForbiddenError):
            return (403, ErrorCode.FORBIDDEN.value, exc.args[0], None)

        if isinstance(exc, ValidationError):
            return (
                422,
                ErrorCode.VALIDATION_ERROR.value,
                "Request validation failed",
                {"errors": exc.errors(include_url=False, include_context=False)},
            )

        if isinstance(exc, ConstraintViolationError):
            return (409, ErrorCode.CONFLICT.value, "Request conflicts with existing data", None)

        for exc_type, status_code, error_code in EXCEPTION_MAP:
            if isinstance(exc, exc_type):
                message = exc.args[0] if status_code < 500 else "Internal server error"
                return (status_code, error_code, message, None)

        # Generic exceptions
        return (
            500,
            ErrorCode.INTERNAL_ERROR.value,
            "Internal server error",
            {"type": type(exc).__name__} if self._is_debug() else None,
        )

    def _is_debug(self) -> bool:
        """Check if debug mode is enabled."""
        return get_settings().DEBUG
