"""API v1 routers."""

from fastapi import APIRouter

from .campaigns import router as campaigns_router
from .creatives import router as creatives_router
from .workspaces import router as workspaces_router

# Create v1 router that includes all v1 endpoints
router = APIRouter(prefix="/v1")

router.include_router(workspaces_router)
router.include_router(campaigns_router)
router.include_router(creatives_router)

__all__ = ["router", "campaigns_router", "creatives_router", "workspaces_router"]
