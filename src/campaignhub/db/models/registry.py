"""Closed set of entity kinds addressable through the storage client."""

from enum import Enum

from .ai_log import AiLog
from .base import Base
from .campaign import AdCreative, Campaign
from .integration import Integration
from .session import UserSession
from .workspace import Workspace, WorkspaceMember


class ModelName(str, Enum):
    """Entity names used in storage descriptors."""

    WORKSPACE = "Workspace"
    WORKSPACE_MEMBER = "WorkspaceMember"
    CAMPAIGN = "Campaign"
    AD_CREATIVE = "AdCreative"
    AI_LOG = "AiLog"
    INTEGRATION = "Integration"
    USER_SESSION = "UserSession"


MODEL_REGISTRY: dict[ModelName, type[Base]] = {
    ModelName.WORKSPACE: Workspace,
    ModelName.WORKSPACE_MEMBER: WorkspaceMember,
    ModelName.CAMPAIGN: Campaign,
    ModelName.AD_CREATIVE: AdCreative,
    ModelName.AI_LOG: AiLog,
    ModelName.INTEGRATION: Integration,
    ModelName.USER_SESSION: UserSession,
}
