"""Third-party ad platform integration model."""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, PortableUUID, SoftDeleteMixin, TimestampMixin

if TYPE_CHECKING:
    from .workspace import Workspace


class IntegrationProvider(str, Enum):
    """External platforms a workspace can connect."""

    META = "META"
    GOOGLE = "GOOGLE"
    TIKTOK = "TIKTOK"


class Integration(Base, TimestampMixin, SoftDeleteMixin):
    """Per-workspace external credential.

    At most one row per (workspace_id, provider, external_id). The access
    token is stored encrypted.
    """

    __tablename__ = "integrations"

    id: Mapped[UUID] = mapped_column(PortableUUID(), primary_key=True, default=uuid4)
    workspace_id: Mapped[UUID] = mapped_column(
        PortableUUID(), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False
    )
    provider: Mapped[str] = mapped_column(String(20), nullable=False)
    external_id: Mapped[str] = mapped_column(String(255), nullable=False)

    access_token: Mapped[str] = mapped_column(Text, nullable=False)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    workspace: Mapped["Workspace"] = relationship(back_populates="integrations", lazy="raise")

    __table_args__ = (
        UniqueConstraint(
            "workspace_id", "provider", "external_id", name="uq_integration_workspace_provider"
        ),
    )

    def __repr__(self) -> str:
        return f"<Integration(id={self.id}, provider={self.provider})>"
