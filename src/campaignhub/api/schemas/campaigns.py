"""Campaign and ad creative API schemas."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from campaignhub.db.models.campaign import AdPlatform, Campaign, CampaignStatus


class AdCreativeResponse(BaseModel):
    """Ad creative as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    campaign_id: UUID
    headline: str
    body: str | None = None
    call_to_action: str | None = None
    image_url: str | None = None
    created_at: datetime
    updated_at: datetime


class CampaignResponse(BaseModel):
    """Campaign without related rows."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    workspace_id: UUID
    name: str
    objective: str | None = None
    platform: AdPlatform
    status: CampaignStatus
    description: str | None = None
    strategy: dict[str, Any] | None = None
    created_by: str
    created_at: datetime
    updated_at: datetime


class CampaignSummaryResponse(CampaignResponse):
    """Campaign list entry with its creative count."""

    ad_creative_count: int = Field(0, description="Number of non-archived creatives")

    @classmethod
    def from_campaign(cls, campaign: Campaign) -> "CampaignSummaryResponse":
        counts = campaign.relation_counts or {}
        return cls.model_validate(campaign).model_copy(
            update={"ad_creative_count": counts.get("ad_creatives", 0)}
        )


class CampaignDetailResponse(CampaignResponse):
    """Campaign with its non-archived creatives."""

    ad_creatives: list[AdCreativeResponse] = Field(default_factory=list)


class CampaignListResponse(BaseModel):
    """Campaigns visible to the caller, newest first."""

    items: list[CampaignSummaryResponse]
    total: int
