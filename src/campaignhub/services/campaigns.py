"""Campaign service.

All campaign mutations go through this service. Each operation checks
tenant access before touching the row, and writes go through the storage
client so deletes become soft deletes.
"""

from typing import Any
from uuid import UUID

from campaignhub.core.access import TenantAccessGuard
from campaignhub.core.logging import get_logger
from campaignhub.core.principal import Principal
from campaignhub.db.models.campaign import Campaign, CampaignStatus
from campaignhub.db.models.registry import ModelName
from campaignhub.db.storage.client import StorageClient

from .types import CampaignCreate, CampaignUpdate

logger = get_logger(__name__)

LIST_ORDER = [{"created_at": "desc"}, {"id": "desc"}]


class CampaignService:
    """Create, list, read, update and archive campaigns for a principal.

    Writes are flushed, not committed; the caller owns the transaction.
    """

    def __init__(self, client: StorageClient, guard: TenantAccessGuard | None = None):
        self.client = client
        self.guard = guard or TenantAccessGuard(client)

    async def create(self, data: CampaignCreate | dict[str, Any], principal: Principal) -> Campaign:
        """Create a DRAFT campaign in the principal's first workspace.

        Args:
            data: Campaign fields; ownership fields in a raw dict are ignored
            principal: The authenticated caller

        Returns:
            The created campaign

        Raises:
            ForbiddenError: If the principal has no workspace
            pydantic.ValidationError: If data is not a valid campaign
        """
        if not isinstance(data, CampaignCreate):
            data = CampaignCreate.model_validate(data)

        workspace_id = await self.guard.require_single_tenant(principal)
        campaign = await self.client.campaign.create(
            data={
                **data.model_dump(),
                "workspace_id": workspace_id,
                "status": CampaignStatus.DRAFT,
                "created_by": principal.subject,
            }
        )

        logger.info(
            "Campaign created",
            campaign_id=str(campaign.id),
            workspace_id=str(workspace_id),
            subject=principal.subject,
        )
        return campaign

    async def list(self, principal: Principal) -> list[Campaign]:
        """List non-archived campaigns across the principal's workspaces.

        Newest first. Each campaign carries
        ``relation_counts["ad_creatives"]``, the number of its
        non-archived creatives.

        Raises:
            ForbiddenError: If the principal has no workspace
        """
        scope = await self.guard.tenant_scope(principal, ModelName.CAMPAIGN)
        return await self.client.campaign.find_many(
            where=scope,
            order_by=LIST_ORDER,
            include={"_count": {"select": {"ad_creatives": True}}},
        )

    async def get(self, campaign_id: UUID, principal: Principal) -> Campaign:
        """Get a campaign with its non-archived creatives.

        Raises:
            NotFoundError: If the campaign is missing, archived or foreign
        """
        return await self.guard.authorize_entity(
            principal, ModelName.CAMPAIGN, campaign_id, include={"ad_creatives": True}
        )

    async def update(
        self,
        campaign_id: UUID,
        patch: CampaignUpdate | dict[str, Any],
        principal: Principal,
    ) -> Campaign:
        """Apply a partial update to a campaign.

        Only fields present in the patch are written. ``workspace_id``,
        ``created_by`` and ``deleted_at`` are never writable.

        Raises:
            NotFoundError: If the campaign is missing, archived or foreign
        """
        if not isinstance(patch, CampaignUpdate):
            patch = CampaignUpdate.model_validate(patch)

        campaign = await self.guard.authorize_entity(principal, ModelName.CAMPAIGN, campaign_id)
        changes = patch.changes()
        if not changes:
            return campaign

        updated = await self.client.campaign.update(where={"id": campaign_id}, data=changes)
        logger.info(
            "Campaign updated",
            campaign_id=str(campaign_id),
            fields=sorted(changes),
            subject=principal.subject,
        )
        return updated

    async def archive(self, campaign_id: UUID, principal: Principal) -> Campaign:
        """Archive (soft-delete) a campaign.

        Archiving twice raises NotFoundError, since an archived campaign
        is no longer visible to the guard.

        Raises:
            NotFoundError: If the campaign is missing, archived or foreign
        """
        await self.guard.authorize_entity(principal, ModelName.CAMPAIGN, campaign_id)
        archived = await self.client.campaign.delete(where={"id": campaign_id})

        logger.info("Campaign archived", campaign_id=str(campaign_id), subject=principal.subject)
        return archived
