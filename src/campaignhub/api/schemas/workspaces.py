"""Workspace API schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class WorkspaceResponse(BaseModel):
    """Workspace as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    brand_voice: str | None = None
    brand_colors: list[str] = Field(default_factory=list)
    logo_url: str | None = None
    created_at: datetime


class WorkspaceListResponse(BaseModel):
    """Workspaces the caller belongs to."""

    items: list[WorkspaceResponse]
