"""Domain services operating through the storage client and tenant guard."""

from .campaigns import CampaignService
from .content import ContentService
from .creatives import AdCreativeService
from .integrations import IntegrationService
from .types import (
    AdCreativeCreate,
    CampaignCreate,
    CampaignUpdate,
    CopyRequest,
    IntegrationConnect,
    TokenUsage,
    WorkspaceCreate,
)
from .usage import AiUsageLedger, UsageTotals
from .workspaces import WorkspaceService

__all__ = [
    # Services
    "CampaignService",
    "AdCreativeService",
    "WorkspaceService",
    "IntegrationService",
    "AiUsageLedger",
    "UsageTotals",
    "ContentService",
    # Inputs
    "CampaignCreate",
    "CampaignUpdate",
    "AdCreativeCreate",
    "WorkspaceCreate",
    "IntegrationConnect",
    "CopyRequest",
    "TokenUsage",
]
