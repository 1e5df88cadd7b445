"""Storage layer: query descriptors, middleware chain and entity client."""

from .client import ModelDelegate, StorageClient, create_storage_client
from .engine import StorageEngine
from .exceptions import (
    ConstraintViolationError,
    QueryValidationError,
    RecordNotFoundError,
    StorageError,
)
from .middleware import QueryLoggingMiddleware, build_chain
from .soft_delete import (
    NON_AUDITABLE_MODELS,
    SOFT_DELETE_FIELD,
    SoftDeleteMiddleware,
    check_soft_delete_coverage,
    is_auditable,
    with_default_visibility,
)
from .types import (
    COUNT_INCLUDE_KEY,
    READ_ACTIONS,
    NextHandler,
    QueryAction,
    QueryMiddleware,
    QueryParams,
)

__all__ = [
    # Client
    "StorageClient",
    "ModelDelegate",
    "create_storage_client",
    "StorageEngine",
    # Descriptors
    "QueryAction",
    "QueryParams",
    "QueryMiddleware",
    "NextHandler",
    "READ_ACTIONS",
    "COUNT_INCLUDE_KEY",
    # Middleware
    "build_chain",
    "QueryLoggingMiddleware",
    "SoftDeleteMiddleware",
    "NON_AUDITABLE_MODELS",
    "SOFT_DELETE_FIELD",
    "check_soft_delete_coverage",
    "is_auditable",
    "with_default_visibility",
    # Errors
    "StorageError",
    "RecordNotFoundError",
    "ConstraintViolationError",
    "QueryValidationError",
]
