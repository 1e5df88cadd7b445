"""Integration tests for IntegrationService."""

import pytest

from campaignhub.core.exceptions import ForbiddenError, NotFoundError
from campaignhub.db.models import IntegrationProvider
from campaignhub.services import IntegrationService

META = IntegrationProvider.META


@pytest.fixture
def service(client, guard, encryptor) -> IntegrationService:
    return IntegrationService(client, guard, encryptor)


def meta_account(token: str = "meta-token-1") -> dict:
    return {"provider": "META", "external_id": "act_123", "access_token": token}


class TestConnect:
    """Tests for IntegrationService.connect."""

    @pytest.mark.asyncio
    async def test_token_stored_encrypted(self, service, raw_client, alice, workspace_a):
        integration = await service.connect(meta_account(), alice)

        stored = await raw_client.integration.find_unique(where={"id": integration.id})
        assert stored.workspace_id == workspace_a.id
        assert stored.access_token != "meta-token-1"
        assert await service.get_access_token(META, "act_123", alice) == "meta-token-1"

    @pytest.mark.asyncio
    async def test_reconnect_refreshes_same_row(self, service, raw_client, alice, workspace_a):
        first = await service.connect(meta_account("old"), alice)
        second = await service.connect(meta_account("new"), alice)

        assert second.id == first.id
        assert await raw_client.integration.count() == 1
        assert await service.get_access_token(META, "act_123", alice) == "new"

    @pytest.mark.asyncio
    async def test_reconnect_after_disconnect_revives(self, service, alice, workspace_a):
        first = await service.connect(meta_account(), alice)
        await service.disconnect(META, "act_123", alice)

        revived = await service.connect(meta_account("fresh"), alice)

        assert revived.id == first.id
        assert revived.deleted_at is None
        assert await service.get_access_token(META, "act_123", alice) == "fresh"

    @pytest.mark.asyncio
    async def test_without_workspace_forbidden(self, service, outsider):
        with pytest.raises(ForbiddenError):
            await service.connect(meta_account(), outsider)


class TestLookup:
    """Tests for reading and disconnecting integrations."""

    @pytest.mark.asyncio
    async def test_missing_integration_not_found(self, service, alice, workspace_a):
        with pytest.raises(NotFoundError):
            await service.get(META, "act_404", alice)

    @pytest.mark.asyncio
    async def test_foreign_integration_not_found(self, service, alice, bob, workspace_a, workspace_b):
        await service.connect(meta_account(), bob)

        with pytest.raises(NotFoundError):
            await service.get_access_token(META, "act_123", alice)

    @pytest.mark.asyncio
    async def test_disconnect_soft_deletes(self, service, raw_client, alice, workspace_a):
        integration = await service.connect(meta_account(), alice)

        await service.disconnect(META, "act_123", alice)

        with pytest.raises(NotFoundError):
            await service.get(META, "act_123", alice)
        stored = await raw_client.integration.find_unique(where={"id": integration.id})
        assert stored.deleted_at is not None
