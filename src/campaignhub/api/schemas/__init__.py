"""API request and response schemas."""

from .campaigns import (
    AdCreativeResponse,
    CampaignDetailResponse,
    CampaignListResponse,
    CampaignResponse,
    CampaignSummaryResponse,
)
from .errors import APIError, ErrorCode
from .health import DatabaseHealthResponse, HealthResponse, HealthStatus
from .workspaces import WorkspaceListResponse, WorkspaceResponse

__all__ = [
    # Errors
    "APIError",
    "ErrorCode",
    # Health
    "HealthResponse",
    "DatabaseHealthResponse",
    "HealthStatus",
    # Campaigns
    "AdCreativeResponse",
    "CampaignResponse",
    "CampaignSummaryResponse",
    "CampaignDetailResponse",
    "CampaignListResponse",
    # Workspaces
    "WorkspaceResponse",
    "WorkspaceListResponse",
]
