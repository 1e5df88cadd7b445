"""Workspace API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from campaignhub.api.dependencies import PrincipalDep, SessionDep, get_workspace_service
from campaignhub.api.schemas.workspaces import WorkspaceListResponse, WorkspaceResponse
from campaignhub.services import WorkspaceCreate, WorkspaceService

router = APIRouter(prefix="/workspaces", tags=["workspaces"])

WorkspaceServiceDep = Annotated[WorkspaceService, Depends(get_workspace_service)]


@router.post(
    "",
    response_model=WorkspaceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a workspace",
)
async def create_workspace(
    body: WorkspaceCreate,
    principal: PrincipalDep,
    service: WorkspaceServiceDep,
    db: SessionDep,
) -> WorkspaceResponse:
    """Create a workspace owned by the caller."""
    workspace = await service.create(body, principal)
    await db.commit()
    return WorkspaceResponse.model_validate(workspace)


@router.get("", response_model=WorkspaceListResponse, summary="List workspaces")
async def list_workspaces(
    principal: PrincipalDep, service: WorkspaceServiceDep
) -> WorkspaceListResponse:
    workspaces = await service.list(principal)
    return WorkspaceListResponse(
        items=[WorkspaceResponse.model_validate(workspace) for workspace in workspaces]
    )
