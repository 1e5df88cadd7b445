"""Campaign and ad creative models."""

from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, PortableJSON, PortableUUID, SoftDeleteMixin, TimestampMixin

if TYPE_CHECKING:
    from .workspace import Workspace


class CampaignStatus(str, Enum):
    """Business status of a campaign.

    Archiving is expressed through ``deleted_at``, not through a status.
    """

    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"
    COMPLETED = "COMPLETED"


class AdPlatform(str, Enum):
    """Ad platforms a campaign can target."""

    META = "META"
    GOOGLE = "GOOGLE"
    TIKTOK = "TIKTOK"
    LINKEDIN = "LINKEDIN"


class Campaign(Base, TimestampMixin, SoftDeleteMixin):
    """Marketing campaign owned by exactly one workspace.

    ``workspace_id`` and ``created_by`` are set at creation and never
    reassigned.
    """

    __tablename__ = "campaigns"

    id: Mapped[UUID] = mapped_column(PortableUUID(), primary_key=True, default=uuid4)
    workspace_id: Mapped[UUID] = mapped_column(
        PortableUUID(), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    objective: Mapped[str | None] = mapped_column(String(255), nullable=True)
    platform: Mapped[str] = mapped_column(String(20), nullable=False, default=AdPlatform.META.value)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=CampaignStatus.DRAFT.value
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Strategy option chosen after AI brainstorming
    strategy: Mapped[dict | None] = mapped_column(PortableJSON(), nullable=True)

    created_by: Mapped[str] = mapped_column(String(255), nullable=False)

    workspace: Mapped["Workspace"] = relationship(back_populates="campaigns", lazy="raise")
    ad_creatives: Mapped[list["AdCreative"]] = relationship(
        back_populates="campaign", lazy="raise", order_by="AdCreative.created_at"
    )

    __table_args__ = (
        Index("idx_campaign_workspace", "workspace_id"),
        Index("idx_campaign_created", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Campaign(id={self.id}, name={self.name}, status={self.status})>"


class AdCreative(Base, TimestampMixin, SoftDeleteMixin):
    """Ad creative attached to a campaign.

    Not tenant-filtered directly; scope is inherited from the campaign.
    """

    __tablename__ = "ad_creatives"

    id: Mapped[UUID] = mapped_column(PortableUUID(), primary_key=True, default=uuid4)
    campaign_id: Mapped[UUID] = mapped_column(
        PortableUUID(), ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False
    )

    headline: Mapped[str] = mapped_column(String(255), nullable=False)
    body: Mapped[str | None] = mapped_column(Text, nullable=True)
    call_to_action: Mapped[str | None] = mapped_column(String(100), nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    campaign: Mapped[Campaign] = relationship(back_populates="ad_creatives", lazy="raise")

    __table_args__ = (Index("idx_ad_creative_campaign", "campaign_id"),)

    def __repr__(self) -> str:
        return f"<AdCreative(id={self.id}, campaign={self.campaign_id})>"
