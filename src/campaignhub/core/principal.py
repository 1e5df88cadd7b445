"""Authenticated caller identity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Principal:
    """The authenticated caller.

    Produced by the authentication collaborator; only ``subject`` is used
    to resolve workspace membership.

    Attributes:
        subject: Stable subject identifier (user id)
        email: Optional email address for display and logging
    """

    subject: str
    email: str | None = None

    def __post_init__(self) -> None:
        if not self.subject:
            raise ValueError("Principal subject must not be empty")
