"""Core exceptions for tenant access and authentication."""

from uuid import UUID

from campaignhub.utils.exceptions import CampaignHubError


class ForbiddenError(CampaignHubError):
    """Raised when the principal has no workspace for an operation that needs one.

    Only list and creation paths raise this. Single-entity paths raise
    NotFoundError instead so that foreign rows are indistinguishable from
    missing ones.

    Attributes:
        subject: The principal's subject identifier
    """

    def __init__(self, subject: str, message: str = "Principal has no accessible workspace"):
        super().__init__(message)
        self.subject = subject

    def __str__(self) -> str:
        return f"ForbiddenError: {self.args[0]} (subject={self.subject})"


class NotFoundError(CampaignHubError):
    """Raised when an entity is absent or outside the principal's workspaces.

    Attributes:
        resource: The entity kind that was looked up (e.g. "Campaign")
        resource_id: The identifier that was looked up
    """

    def __init__(self, resource: str, resource_id: UUID | str):
        super().__init__(f"{resource} not found: {resource_id}")
        self.resource = resource
        self.resource_id = resource_id

    def __str__(self) -> str:
        return f"NotFoundError: {self.args[0]}"


class AuthenticationError(CampaignHubError):
    """Raised when the caller cannot be authenticated.

    Attributes:
        reason: The specific reason authentication failed
    """

    def __init__(self, reason: str = "Authentication failed"):
        super().__init__(reason)
        self.reason = reason

    def __str__(self) -> str:
        return f"AuthenticationError: {self.args[0]}"
