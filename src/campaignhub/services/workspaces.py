"""Workspace and membership service."""

from typing import Any
from uuid import UUID

from campaignhub.core.access import TenantAccessGuard
from campaignhub.core.exceptions import NotFoundError
from campaignhub.core.logging import get_logger
from campaignhub.core.principal import Principal
from campaignhub.db.models.registry import ModelName
from campaignhub.db.models.workspace import MemberRole, Workspace, WorkspaceMember
from campaignhub.db.storage.client import StorageClient

from .types import WorkspaceCreate

logger = get_logger(__name__)


class WorkspaceService:
    """Creates workspaces and manages who belongs to them."""

    def __init__(self, client: StorageClient, guard: TenantAccessGuard | None = None):
        self.client = client
        self.guard = guard or TenantAccessGuard(client)

    async def create(self, data: WorkspaceCreate | dict[str, Any], principal: Principal) -> Workspace:
        """Create a workspace and make the principal its owner.

        Args:
            data: Workspace name and brand metadata
            principal: The authenticated caller

        Returns:
            The created workspace
        """
        if not isinstance(data, WorkspaceCreate):
            data = WorkspaceCreate.model_validate(data)

        workspace = await self.client.workspace.create(data=data.model_dump())
        await self.client.workspace_member.create(
            data={
                "workspace_id": workspace.id,
                "user_id": principal.subject,
                "role": MemberRole.OWNER,
            }
        )

        logger.info("Workspace created", workspace_id=str(workspace.id), owner=principal.subject)
        return workspace

    async def list(self, principal: Principal) -> list[Workspace]:
        """List the principal's workspaces, oldest membership first.

        Returns an empty list when the principal belongs to none.
        """
        tenant_ids = await self.guard.resolve_accessible_tenants(principal)
        if not tenant_ids:
            return []

        workspaces = await self.client.workspace.find_many(where={"id": {"in": tenant_ids}})
        by_id = {workspace.id: workspace for workspace in workspaces}
        return [by_id[tenant_id] for tenant_id in tenant_ids if tenant_id in by_id]

    async def add_member(
        self,
        workspace_id: UUID,
        user_id: str,
        principal: Principal,
        role: MemberRole = MemberRole.MEMBER,
    ) -> WorkspaceMember:
        """Add a user to a workspace the principal belongs to.

        Raises:
            NotFoundError: If the workspace is missing or foreign
            ConstraintViolationError: If the user is already a member
        """
        await self.guard.authorize_entity(principal, ModelName.WORKSPACE, workspace_id)
        member = await self.client.workspace_member.create(
            data={"workspace_id": workspace_id, "user_id": user_id, "role": role}
        )

        logger.info(
            "Workspace member added",
            workspace_id=str(workspace_id),
            user_id=user_id,
            role=MemberRole(role).value,
        )
        return member

    async def remove_member(self, workspace_id: UUID, user_id: str, principal: Principal) -> None:
        """Remove a user's membership. Memberships are deleted physically.

        Raises:
            NotFoundError: If the workspace is foreign or the user is not a member
        """
        await self.guard.authorize_entity(principal, ModelName.WORKSPACE, workspace_id)
        result = await self.client.workspace_member.delete_many(
            where={"workspace_id": workspace_id, "user_id": user_id}
        )
        if result["count"] == 0:
            raise NotFoundError(ModelName.WORKSPACE_MEMBER.value, user_id)

        logger.info("Workspace member removed", workspace_id=str(workspace_id), user_id=user_id)
