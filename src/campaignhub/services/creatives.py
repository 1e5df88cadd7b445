"""Ad creative service."""

from typing import Any
from uuid import UUID

from campaignhub.core.access import TenantAccessGuard
from campaignhub.core.logging import get_logger
from campaignhub.core.principal import Principal
from campaignhub.db.models.campaign import AdCreative
from campaignhub.db.models.registry import ModelName
from campaignhub.db.storage.client import StorageClient

from .types import AdCreativeCreate

logger = get_logger(__name__)


class AdCreativeService:
    """Manages creatives; access is always decided through the parent campaign."""

    def __init__(self, client: StorageClient, guard: TenantAccessGuard | None = None):
        self.client = client
        self.guard = guard or TenantAccessGuard(client)

    async def add(
        self,
        campaign_id: UUID,
        data: AdCreativeCreate | dict[str, Any],
        principal: Principal,
    ) -> AdCreative:
        """Attach a new creative to a campaign.

        Raises:
            NotFoundError: If the campaign is missing, archived or foreign
        """
        if not isinstance(data, AdCreativeCreate):
            data = AdCreativeCreate.model_validate(data)

        await self.guard.authorize_entity(principal, ModelName.CAMPAIGN, campaign_id)
        creative = await self.client.ad_creative.create(
            data={**data.model_dump(), "campaign_id": campaign_id}
        )

        logger.info("Ad creative added", creative_id=str(creative.id), campaign_id=str(campaign_id))
        return creative

    async def archive(self, creative_id: UUID, principal: Principal) -> AdCreative:
        """Archive (soft-delete) a creative.

        Raises:
            NotFoundError: If the creative or its campaign is missing,
                archived or foreign
        """
        await self.guard.authorize_entity(principal, ModelName.AD_CREATIVE, creative_id)
        archived = await self.client.ad_creative.delete(where={"id": creative_id})

        logger.info("Ad creative archived", creative_id=str(creative_id))
        return archived
