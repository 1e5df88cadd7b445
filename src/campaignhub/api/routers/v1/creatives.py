"""Ad creative API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from campaignhub.api.dependencies import PrincipalDep, SessionDep, get_creative_service
from campaignhub.services import AdCreativeService

router = APIRouter(prefix="/creatives", tags=["creatives"])


@router.delete(
    "/{creative_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Archive an ad creative",
)
async def archive_creative(
    creative_id: UUID,
    principal: PrincipalDep,
    service: Annotated[AdCreativeService, Depends(get_creative_service)],
    db: SessionDep,
) -> None:
    await service.archive(creative_id, principal)
    await db.commit()
