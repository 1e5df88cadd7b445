"""Input models for the service layer.

These are the only shapes services accept for writes. Ownership fields
(``workspace_id``, ``created_by``, ``deleted_at``) are not part of any
input model, so callers cannot set them; unknown keys are ignored.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from campaignhub.db.models.ai_log import AiGenerationType
from campaignhub.db.models.campaign import AdPlatform, CampaignStatus
from campaignhub.db.models.integration import IntegrationProvider

# =============================================================================
# Campaigns
# =============================================================================

REQUIRED_CAMPAIGN_FIELDS = frozenset({"name", "platform", "status"})


class CampaignCreate(BaseModel):
    """Fields a caller may provide when creating a campaign."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1, max_length=255)
    objective: str | None = Field(default=None, max_length=255)
    platform: AdPlatform = AdPlatform.META
    description: str | None = None
    strategy: dict[str, Any] | None = None


class CampaignUpdate(BaseModel):
    """Partial campaign update; only explicitly set fields are applied."""

    model_config = ConfigDict(extra="ignore")

    name: str | None = Field(default=None, min_length=1, max_length=255)
    objective: str | None = Field(default=None, max_length=255)
    platform: AdPlatform | None = None
    status: CampaignStatus | None = None
    description: str | None = None
    strategy: dict[str, Any] | None = None

    def changes(self) -> dict[str, Any]:
        """Get the set fields as a storage data dict.

        Explicit nulls are dropped for columns that cannot be null.
        """
        data = self.model_dump(exclude_unset=True)
        return {
            key: value
            for key, value in data.items()
            if value is not None or key not in REQUIRED_CAMPAIGN_FIELDS
        }


# =============================================================================
# Ad creatives
# =============================================================================


class AdCreativeCreate(BaseModel):
    """Fields for a new ad creative."""

    model_config = ConfigDict(extra="ignore")

    headline: str = Field(min_length=1, max_length=255)
    body: str | None = None
    call_to_action: str | None = Field(default=None, max_length=100)
    image_url: str | None = Field(default=None, max_length=1024)


# =============================================================================
# Workspaces
# =============================================================================


class WorkspaceCreate(BaseModel):
    """Fields for a new workspace."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1, max_length=255)
    brand_voice: str | None = Field(default=None, max_length=500)
    brand_colors: list[str] = Field(default_factory=list)
    logo_url: str | None = Field(default=None, max_length=1024)


# =============================================================================
# Integrations and usage
# =============================================================================


class IntegrationConnect(BaseModel):
    """Credential for an external ad platform account."""

    provider: IntegrationProvider
    external_id: str = Field(min_length=1, max_length=255)
    access_token: str = Field(min_length=1)
    expires_at: datetime | None = None


class TokenUsage(BaseModel):
    """Token counts for one AI generation call.

    ``total_tokens`` defaults to input plus output when omitted.
    """

    type: AiGenerationType
    input_tokens: int = Field(default=0, ge=0)
    output_tokens: int = Field(default=0, ge=0)
    total_tokens: int | None = Field(default=None, ge=0)
    provider: str | None = None
    model: str | None = None

    @property
    def total(self) -> int:
        if self.total_tokens is not None:
            return self.total_tokens
        return self.input_tokens + self.output_tokens


class CopyRequest(BaseModel):
    """Product and objective to write campaign copy for."""

    product: str = Field(min_length=1, max_length=255)
    objective: str = Field(min_length=1, max_length=255)
