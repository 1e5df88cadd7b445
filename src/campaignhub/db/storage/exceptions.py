"""Storage-level exceptions.

Raised by the storage engine and propagated unchanged through the
middleware chain.
"""

from typing import Any

from campaignhub.utils.exceptions import CampaignHubError


class StorageError(CampaignHubError):
    """Base class for failures reported by the storage engine.

    Attributes:
        model: Entity name the call targeted
        action: Storage action that failed
    """

    def __init__(self, message: str, model: str | None = None, action: str | None = None):
        super().__init__(message)
        self.model = model
        self.action = action

    def __str__(self) -> str:
        return f"{type(self).__name__}: {self.args[0]} (model={self.model}, action={self.action})"


class RecordNotFoundError(StorageError):
    """Raised when a single-row write matches no row.

    Attributes:
        where: The filter descriptor that matched nothing
    """

    def __init__(self, model: str, action: str, where: dict[str, Any] | None = None):
        super().__init__(f"No {model} record matches the given filter", model, action)
        self.where = where


class ConstraintViolationError(StorageError):
    """Raised when a write violates a unique, foreign-key or not-null constraint."""

    pass


class QueryValidationError(StorageError):
    """Raised when a query descriptor is malformed (unknown field, operator or argument)."""

    pass
