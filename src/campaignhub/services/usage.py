"""AI token usage ledger.

Ledger rows are never soft-deleted or filtered; summaries always reflect
every recorded call.
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Any
from uuid import UUID

from campaignhub.config.settings import Settings, get_settings
from campaignhub.core.access import TenantAccessGuard
from campaignhub.core.logging import get_logger
from campaignhub.core.principal import Principal
from campaignhub.db.models.ai_log import AiGenerationType, AiLog
from campaignhub.db.models.registry import ModelName
from campaignhub.db.storage.client import StorageClient

from .types import TokenUsage

logger = get_logger(__name__)


@dataclass
class UsageTotals:
    """Summed token counts for one generation type."""

    calls: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0


class AiUsageLedger:
    """Records and reports AI token usage per workspace."""

    def __init__(
        self,
        client: StorageClient,
        guard: TenantAccessGuard | None = None,
        settings: Settings | None = None,
    ):
        self.client = client
        self.guard = guard or TenantAccessGuard(client)
        self.settings = settings or get_settings()

    async def record(
        self,
        usage: TokenUsage | dict[str, Any],
        principal: Principal,
        workspace_id: UUID | None = None,
    ) -> AiLog:
        """Append a usage record.

        Args:
            usage: Token counts and generation type; provider and model
                default to the configured AI settings
            principal: The caller the usage is billed to
            workspace_id: Workspace to bill; defaults to the principal's
                first workspace

        Raises:
            ForbiddenError: If the principal has no workspace or is not a
                member of workspace_id
        """
        if not isinstance(usage, TokenUsage):
            usage = TokenUsage.model_validate(usage)
        workspace_id = await self.guard.require_tenant(principal, workspace_id)

        entry = await self.client.ai_log.create(
            data={
                "user_id": principal.subject,
                "workspace_id": workspace_id,
                "provider": usage.provider or self.settings.ai_provider.value,
                "model": usage.model or self.settings.ai_model,
                "type": usage.type,
                "input_tokens": usage.input_tokens,
                "output_tokens": usage.output_tokens,
                "total_tokens": usage.total,
            }
        )

        logger.debug(
            "AI usage recorded",
            workspace_id=str(workspace_id),
            type=usage.type.value,
            total_tokens=usage.total,
        )
        return entry

    async def entries(self, principal: Principal) -> list[AiLog]:
        """List usage records for the principal's workspaces, newest first.

        Raises:
            ForbiddenError: If the principal has no workspace
        """
        scope = await self.guard.tenant_scope(principal, ModelName.AI_LOG)
        return await self.client.ai_log.find_many(
            where=scope, order_by=[{"created_at": "desc"}, {"id": "desc"}]
        )

    async def summarize(self, principal: Principal) -> dict[AiGenerationType, UsageTotals]:
        """Sum usage per generation type across the principal's workspaces.

        Raises:
            ForbiddenError: If the principal has no workspace
        """
        totals: dict[AiGenerationType, UsageTotals] = defaultdict(UsageTotals)
        for entry in await self.entries(principal):
            bucket = totals[AiGenerationType(entry.type)]
            bucket.calls += 1
            bucket.input_tokens += entry.input_tokens
            bucket.output_tokens += entry.output_tokens
            bucket.total_tokens += entry.total_tokens
        return dict(totals)
