"""Ad platform integration service.

Access tokens are encrypted before they reach storage and only decrypted
on explicit request.
"""

from typing import Any

from campaignhub.core.access import TenantAccessGuard
from campaignhub.core.encryption import Encryptor, get_encryptor
from campaignhub.core.exceptions import NotFoundError
from campaignhub.core.logging import get_logger
from campaignhub.core.principal import Principal
from campaignhub.db.models.integration import Integration, IntegrationProvider
from campaignhub.db.models.registry import ModelName
from campaignhub.db.storage.client import StorageClient

from .types import IntegrationConnect

logger = get_logger(__name__)


class IntegrationService:
    """Connects and disconnects external accounts for the principal's workspace."""

    def __init__(
        self,
        client: StorageClient,
        guard: TenantAccessGuard | None = None,
        encryptor: Encryptor | None = None,
    ):
        self.client = client
        self.guard = guard or TenantAccessGuard(client)
        self._encryptor = encryptor

    @property
    def encryptor(self) -> Encryptor:
        if self._encryptor is None:
            self._encryptor = get_encryptor()
        return self._encryptor

    async def connect(
        self, data: IntegrationConnect | dict[str, Any], principal: Principal
    ) -> Integration:
        """Store or refresh a credential for the principal's workspace.

        There is at most one integration per (workspace, provider,
        external_id). Reconnecting a disconnected account revives it.

        Raises:
            ForbiddenError: If the principal has no workspace
        """
        if not isinstance(data, IntegrationConnect):
            data = IntegrationConnect.model_validate(data)

        workspace_id = await self.guard.require_single_tenant(principal)
        token = self.encryptor.encrypt_string(data.access_token)
        key = {
            "workspace_id": workspace_id,
            "provider": data.provider,
            "external_id": data.external_id,
        }

        integration = await self.client.integration.upsert(
            where=key,
            create={**key, "access_token": token, "expires_at": data.expires_at},
            update={"access_token": token, "expires_at": data.expires_at, "deleted_at": None},
        )

        logger.info(
            "Integration connected",
            integration_id=str(integration.id),
            workspace_id=str(workspace_id),
            provider=data.provider.value,
        )
        return integration

    async def get(
        self, provider: IntegrationProvider, external_id: str, principal: Principal
    ) -> Integration:
        """Get a connected integration in one of the principal's workspaces.

        Raises:
            ForbiddenError: If the principal has no workspace
            NotFoundError: If no such integration is connected
        """
        scope = await self.guard.tenant_scope(principal, ModelName.INTEGRATION)
        integration = await self.client.integration.find_first(
            where={**scope, "provider": provider, "external_id": external_id},
            order_by={"created_at": "asc"},
        )
        if integration is None:
            raise NotFoundError(ModelName.INTEGRATION.value, f"{provider.value}:{external_id}")
        return integration

    async def get_access_token(
        self, provider: IntegrationProvider, external_id: str, principal: Principal
    ) -> str:
        """Get the decrypted access token of a connected integration.

        Raises:
            ForbiddenError: If the principal has no workspace
            NotFoundError: If no such integration is connected
            DecryptionError: If the stored token cannot be decrypted
        """
        integration = await self.get(provider, external_id, principal)
        return self.encryptor.decrypt_string(integration.access_token)

    async def disconnect(
        self, provider: IntegrationProvider, external_id: str, principal: Principal
    ) -> Integration:
        """Disconnect (soft-delete) an integration.

        Raises:
            ForbiddenError: If the principal has no workspace
            NotFoundError: If no such integration is connected
        """
        integration = await self.get(provider, external_id, principal)
        disconnected = await self.client.integration.delete(where={"id": integration.id})

        logger.info("Integration disconnected", integration_id=str(integration.id))
        return disconnected
