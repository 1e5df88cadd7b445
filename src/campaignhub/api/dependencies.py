"""FastAPI dependencies for API endpoints."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from campaignhub.core.access import TenantAccessGuard
from campaignhub.core.exceptions import AuthenticationError
from campaignhub.core.principal import Principal
from campaignhub.db.config import get_db
from campaignhub.db.storage.client import StorageClient, create_storage_client
from campaignhub.services import AdCreativeService, CampaignService, WorkspaceService

__all__ = [
    "get_db",
    "get_principal",
    "get_storage_client",
    "get_guard",
    "get_campaign_service",
    "get_creative_service",
    "get_workspace_service",
]


def get_principal(request: Request) -> Principal:
    """Get the principal set by AuthenticationMiddleware.

    Raises:
        AuthenticationError: If the request was not authenticated
    """
    principal = getattr(request.state, "principal", None)
    if principal is None:
        raise AuthenticationError("Request is not authenticated")
    return principal


def get_storage_client(db: Annotated[AsyncSession, Depends(get_db)]) -> StorageClient:
    """Get a storage client bound to the request's session."""
    return create_storage_client(db)


def get_guard(client: Annotated[StorageClient, Depends(get_storage_client)]) -> TenantAccessGuard:
    return TenantAccessGuard(client)


def get_campaign_service(
    client: Annotated[StorageClient, Depends(get_storage_client)],
    guard: Annotated[TenantAccessGuard, Depends(get_guard)],
) -> CampaignService:
    return CampaignService(client, guard)


def get_creative_service(
    client: Annotated[StorageClient, Depends(get_storage_client)],
    guard: Annotated[TenantAccessGuard, Depends(get_guard)],
) -> AdCreativeService:
    return AdCreativeService(client, guard)


def get_workspace_service(
    client: Annotated[StorageClient, Depends(get_storage_client)],
    guard: Annotated[TenantAccessGuard, Depends(get_guard)],
) -> WorkspaceService:
    return WorkspaceService(client, guard)


PrincipalDep = Annotated[Principal, Depends(get_principal)]
SessionDep = Annotated[AsyncSession, Depends(get_db)]
