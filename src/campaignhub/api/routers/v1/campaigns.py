"""Campaign API endpoints.

- POST   /campaigns                  Create a DRAFT campaign
- GET    /campaigns                  List campaigns in the caller's workspaces
- GET    /campaigns/{id}             Campaign with its creatives
- PATCH  /campaigns/{id}             Partial update
- DELETE /campaigns/{id}             Archive
- POST   /campaigns/{id}/creatives   Add an ad creative
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from campaignhub.api.dependencies import (
    PrincipalDep,
    SessionDep,
    get_campaign_service,
    get_creative_service,
)
from campaignhub.api.schemas.campaigns import (
    AdCreativeResponse,
    CampaignDetailResponse,
    CampaignListResponse,
    CampaignResponse,
    CampaignSummaryResponse,
)
from campaignhub.services import (
    AdCreativeCreate,
    AdCreativeService,
    CampaignCreate,
    CampaignService,
    CampaignUpdate,
)

router = APIRouter(prefix="/campaigns", tags=["campaigns"])

CampaignServiceDep = Annotated[CampaignService, Depends(get_campaign_service)]


@router.post(
    "",
    response_model=CampaignResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a campaign",
)
async def create_campaign(
    body: CampaignCreate,
    principal: PrincipalDep,
    service: CampaignServiceDep,
    db: SessionDep,
) -> CampaignResponse:
    """Create a DRAFT campaign in the caller's first workspace."""
    campaign = await service.create(body, principal)
    await db.commit()
    return CampaignResponse.model_validate(campaign)


@router.get("", response_model=CampaignListResponse, summary="List campaigns")
async def list_campaigns(principal: PrincipalDep, service: CampaignServiceDep) -> CampaignListResponse:
    """List non-archived campaigns, newest first, with creative counts."""
    campaigns = await service.list(principal)
    return CampaignListResponse(
        items=[CampaignSummaryResponse.from_campaign(campaign) for campaign in campaigns],
        total=len(campaigns),
    )


@router.get("/{campaign_id}", response_model=CampaignDetailResponse, summary="Get a campaign")
async def get_campaign(
    campaign_id: UUID, principal: PrincipalDep, service: CampaignServiceDep
) -> CampaignDetailResponse:
    campaign = await service.get(campaign_id, principal)
    return CampaignDetailResponse.model_validate(campaign)


@router.patch("/{campaign_id}", response_model=CampaignResponse, summary="Update a campaign")
async def update_campaign(
    campaign_id: UUID,
    body: CampaignUpdate,
    principal: PrincipalDep,
    service: CampaignServiceDep,
    db: SessionDep,
) -> CampaignResponse:
    """Apply the fields present in the body; ownership fields are ignored."""
    campaign = await service.update(campaign_id, body, principal)
    await db.commit()
    return CampaignResponse.model_validate(campaign)


@router.delete(
    "/{campaign_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Archive a campaign",
)
async def archive_campaign(
    campaign_id: UUID,
    principal: PrincipalDep,
    service: CampaignServiceDep,
    db: SessionDep,
) -> None:
    await service.archive(campaign_id, principal)
    await db.commit()


@router.post(
    "/{campaign_id}/creatives",
    response_model=AdCreativeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add an ad creative",
)
async def add_creative(
    campaign_id: UUID,
    body: AdCreativeCreate,
    principal: PrincipalDep,
    service: Annotated[AdCreativeService, Depends(get_creative_service)],
    db: SessionDep,
) -> AdCreativeResponse:
    creative = await service.add(campaign_id, body, principal)
    await db.commit()
    return AdCreativeResponse.model_validate(creative)
