"""Workspace (tenant) and membership models."""

from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, CreatedAtMixin, PortableJSON, PortableUUID, SoftDeleteMixin, TimestampMixin

if TYPE_CHECKING:
    from .campaign import Campaign
    from .integration import Integration


class MemberRole(str, Enum):
    """Role of a user inside a workspace."""

    OWNER = "OWNER"
    MEMBER = "MEMBER"


class Workspace(Base, TimestampMixin, SoftDeleteMixin):
    """Tenant that owns campaigns and integrations.

    All tenant data is isolated by ``workspace_id``. Brand metadata feeds
    the AI content prompts.
    """

    __tablename__ = "workspaces"

    id: Mapped[UUID] = mapped_column(PortableUUID(), primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Brand metadata
    brand_voice: Mapped[str | None] = mapped_column(String(500), nullable=True)
    brand_colors: Mapped[list] = mapped_column(PortableJSON(), nullable=False, default=list)
    logo_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    members: Mapped[list["WorkspaceMember"]] = relationship(
        back_populates="workspace", lazy="raise"
    )
    campaigns: Mapped[list["Campaign"]] = relationship(back_populates="workspace", lazy="raise")
    integrations: Mapped[list["Integration"]] = relationship(
        back_populates="workspace", lazy="raise"
    )

    def __repr__(self) -> str:
        return f"<Workspace(id={self.id}, name={self.name})>"


class WorkspaceMember(Base, CreatedAtMixin):
    """Membership of a user in a workspace.

    Determines tenant access scope. Removing a member deletes the row.
    """

    __tablename__ = "workspace_members"

    id: Mapped[UUID] = mapped_column(PortableUUID(), primary_key=True, default=uuid4)
    workspace_id: Mapped[UUID] = mapped_column(
        PortableUUID(), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=MemberRole.MEMBER.value)

    workspace: Mapped[Workspace] = relationship(back_populates="members", lazy="raise")

    __table_args__ = (
        UniqueConstraint("workspace_id", "user_id", name="uq_workspace_member"),
        Index("idx_workspace_member_user", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<WorkspaceMember(workspace={self.workspace_id}, user={self.user_id})>"
