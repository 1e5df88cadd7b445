"""Authentication middleware for API key validation."""

import re
import secrets
from collections.abc import Callable
from datetime import UTC, datetime

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from campaignhub.api.schemas.errors import APIError, ErrorCode
from campaignhub.config.settings import Settings, get_settings
from campaignhub.core.principal import Principal

USER_ID_HEADER = "X-User-ID"
USER_EMAIL_HEADER = "X-User-Email"

# Paths that don't require authentication
SKIP_AUTH_PATHS = {
    "/health",
    "/health/db",
    "/docs",
    "/redoc",
    "/openapi.json",
}

BEARER_PATTERN = re.compile(r"^Bearer\s+(.+)$", re.IGNORECASE)


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """Validates the Bearer token and identifies the calling user.

    The token authenticates the calling service; the end user the call is
    made for is named by the X-User-ID header.

    Sets:
        request.state.principal: The authenticated Principal
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and validate authentication."""
        if request.url.path in SKIP_AUTH_PATHS:
            return await call_next(request)

        auth_header = request.headers.get("Authorization")
        if not auth_header:
            return self._unauthorized_response(request, "Missing Authorization header")

        match = BEARER_PATTERN.match(auth_header)
        if not match:
            return self._unauthorized_response(request, "Invalid Authorization header format")

        if not self._validate_token(match.group(1), self._settings(request)):
            return self._unauthorized_response(request, "Invalid API key")

        subject = request.headers.get(USER_ID_HEADER, "").strip()
        if not subject:
            return self._unauthorized_response(request, f"Missing {USER_ID_HEADER} header")

        request.state.principal = Principal(
            subject=subject, email=request.headers.get(USER_EMAIL_HEADER)
        )
        return await call_next(request)

    def _settings(self, request: Request) -> Settings:
        return getattr(request.app.state, "settings", None) or get_settings()

    def _validate_token(self, token: str, settings: Settings) -> bool:
        """Check the token against API_SECRET_KEY.

        Without a configured key any non-empty token is accepted in DEBUG
        mode only.
        """
        if settings.API_SECRET_KEY is None:
            return bool(token) and settings.DEBUG
        return secrets.compare_digest(token, settings.API_SECRET_KEY.get_secret_value())

    def _unauthorized_response(self, request: Request, message: str) -> JSONResponse:
        """Create a 401 unauthorized response."""
        error = APIError(
            error_code=ErrorCode.UNAUTHORIZED.value,
            message=message,
            details=None,
            request_id=str(getattr(request.state, "request_id", "unknown")),
            timestamp=datetime.now(UTC),
        )

        return JSONResponse(
            status_code=401,
            content=error.model_dump(mode="json"),
            headers={"WWW-Authenticate": "Bearer"},
        )
