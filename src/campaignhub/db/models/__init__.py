"""Database models for campaignhub."""

from .ai_log import AiGenerationType, AiLog
from .base import Base, CreatedAtMixin, SoftDeleteMixin, TimestampMixin
from .campaign import AdCreative, AdPlatform, Campaign, CampaignStatus
from .integration import Integration, IntegrationProvider
from .registry import MODEL_REGISTRY, ModelName
from .session import UserSession
from .workspace import MemberRole, Workspace, WorkspaceMember

__all__ = [
    "Base",
    "CreatedAtMixin",
    "TimestampMixin",
    "SoftDeleteMixin",
    "Workspace",
    "WorkspaceMember",
    "MemberRole",
    "Campaign",
    "CampaignStatus",
    "AdPlatform",
    "AdCreative",
    "AiLog",
    "AiGenerationType",
    "Integration",
    "IntegrationProvider",
    "UserSession",
    "ModelName",
    "MODEL_REGISTRY",
]
