"""Core services and utilities for campaignhub."""

from .access import TENANT_SCOPE_PATHS, TenantAccessGuard, scoped_where
from .exceptions import AuthenticationError, ForbiddenError, NotFoundError
from .principal import Principal

__all__ = [
    # Access
    "TenantAccessGuard",
    "TENANT_SCOPE_PATHS",
    "scoped_where",
    "Principal",
    # Errors
    "AuthenticationError",
    "ForbiddenError",
    "NotFoundError",
]
