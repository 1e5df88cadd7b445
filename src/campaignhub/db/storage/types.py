"""Query descriptors passed through the storage middleware chain."""

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Protocol

from campaignhub.db.models.registry import ModelName


class QueryAction(str, Enum):
    """Operations supported by the storage client."""

    FIND_MANY = "find_many"
    FIND_FIRST = "find_first"
    FIND_UNIQUE = "find_unique"
    COUNT = "count"
    CREATE = "create"
    UPDATE = "update"
    UPDATE_MANY = "update_many"
    UPSERT = "upsert"
    DELETE = "delete"
    DELETE_MANY = "delete_many"


READ_ACTIONS: frozenset[QueryAction] = frozenset(
    {
        QueryAction.FIND_MANY,
        QueryAction.FIND_FIRST,
        QueryAction.FIND_UNIQUE,
        QueryAction.COUNT,
    }
)

# Include key requesting per-row relation counts
COUNT_INCLUDE_KEY = "_count"


@dataclass(frozen=True)
class QueryParams:
    """A single storage call.

    Middlewares never mutate a QueryParams; they hand a new one to the
    next handler.

    Attributes:
        model: Target entity
        action: Operation to perform
        args: Descriptor with any of where, data, select, include,
            order_by, take, skip, create, update
    """

    model: ModelName
    action: QueryAction
    args: Mapping[str, Any] = field(default_factory=dict)

    def with_args(self, **changes: Any) -> "QueryParams":
        """Return a copy with the given descriptor keys replaced."""
        return replace(self, args={**self.args, **changes})


NextHandler = Callable[[QueryParams], Awaitable[Any]]


class QueryMiddleware(Protocol):
    """Interceptor in the storage middleware chain."""

    async def __call__(self, params: QueryParams, call_next: NextHandler) -> Any: ...
