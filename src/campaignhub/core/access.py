"""Tenant access guard.

Resolves which workspaces a principal may act in and loads single
entities only when they belong to one of them. Foreign and missing rows
both surface as NotFoundError.
"""

from collections.abc import Mapping
from typing import Any
from uuid import UUID

from campaignhub.core.exceptions import ForbiddenError, NotFoundError
from campaignhub.core.logging import get_logger
from campaignhub.core.principal import Principal
from campaignhub.db.models.registry import ModelName
from campaignhub.db.storage.client import StorageClient

logger = get_logger(__name__)


def _workspace_scope(ids: list[UUID]) -> dict[str, Any]:
    return {"id": {"in": ids}}


def _workspace_id_scope(ids: list[UUID]) -> dict[str, Any]:
    return {"workspace_id": {"in": ids}}


def _campaign_parent_scope(ids: list[UUID]) -> dict[str, Any]:
    # Creatives of an archived campaign are out of scope too
    return {"campaign": {"is": {"workspace_id": {"in": ids}, "deleted_at": None}}}


TENANT_SCOPE_PATHS = {
    ModelName.WORKSPACE: _workspace_scope,
    ModelName.CAMPAIGN: _workspace_id_scope,
    ModelName.INTEGRATION: _workspace_id_scope,
    ModelName.AD_CREATIVE: _campaign_parent_scope,
    ModelName.AI_LOG: _workspace_id_scope,
}


def scoped_where(model: ModelName, tenant_ids: list[UUID]) -> dict[str, Any]:
    """Build the where predicate restricting a model to the given workspaces.

    Raises:
        ValueError: If the model has no tenant scope path
    """
    try:
        path = TENANT_SCOPE_PATHS[model]
    except KeyError:
        raise ValueError(f"{model.value} is not tenant-scoped") from None
    return path(list(tenant_ids))


class TenantAccessGuard:
    """Maps a principal to the workspaces it may access.

    Holds no state besides the storage client; membership is read on
    every call.
    """

    def __init__(self, client: StorageClient):
        self.client = client

    async def resolve_accessible_tenants(self, principal: Principal) -> list[UUID]:
        """Get the principal's workspace ids, oldest membership first.

        Args:
            principal: The authenticated caller

        Returns:
            Distinct workspace ids; empty when the principal has no membership
        """
        rows = await self.client.workspace_member.find_many(
            where={
                "user_id": principal.subject,
                "workspace": {"is": {"deleted_at": None}},
            },
            select={"workspace_id": True},
            order_by=[{"created_at": "asc"}, {"id": "asc"}],
        )
        return list(dict.fromkeys(row["workspace_id"] for row in rows))

    async def require_single_tenant(self, principal: Principal) -> UUID:
        """Get the workspace new entities are bound to.

        Raises:
            ForbiddenError: If the principal has no workspace
        """
        tenant_ids = await self.resolve_accessible_tenants(principal)
        if not tenant_ids:
            logger.info("tenant_access_denied", subject=principal.subject, reason="no_workspace")
            raise ForbiddenError(principal.subject)
        return tenant_ids[0]

    async def require_tenant(self, principal: Principal, workspace_id: UUID | None = None) -> UUID:
        """Get a workspace the principal may write to.

        Args:
            principal: The authenticated caller
            workspace_id: Requested workspace; defaults to the principal's
                first workspace

        Raises:
            ForbiddenError: If the principal has no workspace or is not a
                member of the requested one
        """
        if workspace_id is None:
            return await self.require_single_tenant(principal)

        tenant_ids = await self.resolve_accessible_tenants(principal)
        if workspace_id not in tenant_ids:
            logger.info(
                "tenant_access_denied",
                subject=principal.subject,
                workspace_id=str(workspace_id),
                reason="not_a_member",
            )
            raise ForbiddenError(principal.subject)
        return workspace_id


    async def tenant_scope(self, principal: Principal, model: ModelName) -> dict[str, Any]:
        """Get the list-scope where predicate for a model.

        Raises:
            ForbiddenError: If the principal has no workspace
        """
        tenant_ids = await self.resolve_accessible_tenants(principal)
        if not tenant_ids:
            logger.info("tenant_access_denied", subject=principal.subject, reason="no_workspace")
            raise ForbiddenError(principal.subject)
        return scoped_where(model, tenant_ids)

    async def authorize_entity(
        self,
        principal: Principal,
        model: ModelName,
        entity_id: UUID,
        include: Mapping[str, Any] | None = None,
    ) -> Any:
        """Load an entity the principal is allowed to see.

        Args:
            principal: The authenticated caller
            model: Entity kind
            entity_id: Entity primary key
            include: Optional relations to load with the row

        Returns:
            The non-archived row

        Raises:
            NotFoundError: If the row is missing, archived, or belongs to a
                workspace the principal is not a member of
        """
        tenant_ids = await self.resolve_accessible_tenants(principal)
        if not tenant_ids:
            raise NotFoundError(model.value, entity_id)

        row = await self.client.delegate(model).find_first(
            where={"AND": [{"id": entity_id}, scoped_where(model, tenant_ids)]},
            include=include,
        )
        if row is None:
            logger.debug(
                "entity_not_accessible",
                model=model.value,
                entity_id=str(entity_id),
                subject=principal.subject,
            )
            raise NotFoundError(model.value, entity_id)
        return row
