"""Unit tests for service input models."""

import pytest
from pydantic import ValidationError

from campaignhub.db.models import AdPlatform, AiGenerationType, CampaignStatus
from campaignhub.services.types import CampaignCreate, CampaignUpdate, TokenUsage


class TestCampaignCreate:
    """Tests for CampaignCreate."""

    def test_ownership_fields_ignored(self):
        """Test callers cannot smuggle ownership fields through input."""
        data = CampaignCreate.model_validate(
            {
                "name": "Spring Launch",
                "workspace_id": "00000000-0000-0000-0000-000000000000",
                "created_by": "mallory",
                "status": "ACTIVE",
                "deleted_at": "2026-01-01T00:00:00Z",
            }
        )

        dumped = data.model_dump()
        assert dumped["name"] == "Spring Launch"
        for field in ("workspace_id", "created_by", "status", "deleted_at"):
            assert field not in dumped

    def test_defaults(self):
        data = CampaignCreate(name="Spring Launch")

        assert data.platform == AdPlatform.META
        assert data.strategy is None

    def test_name_required(self):
        with pytest.raises(ValidationError):
            CampaignCreate.model_validate({"objective": "awareness"})

    def test_rejects_unknown_platform(self):
        with pytest.raises(ValidationError):
            CampaignCreate(name="x", platform="MYSPACE")


class TestCampaignUpdate:
    """Tests for CampaignUpdate.changes."""

    def test_only_set_fields(self):
        patch = CampaignUpdate.model_validate({"name": "Renamed"})

        assert patch.changes() == {"name": "Renamed"}

    def test_explicit_null_kept_for_nullable_fields(self):
        patch = CampaignUpdate.model_validate({"description": None, "strategy": None})

        assert patch.changes() == {"description": None, "strategy": None}

    def test_explicit_null_dropped_for_required_fields(self):
        patch = CampaignUpdate.model_validate({"name": None, "status": None, "objective": "x"})

        assert patch.changes() == {"objective": "x"}

    def test_protected_fields_never_appear(self):
        patch = CampaignUpdate.model_validate(
            {"workspace_id": "x", "created_by": "y", "deleted_at": None, "status": "PAUSED"}
        )

        assert patch.changes() == {"status": CampaignStatus.PAUSED}

    def test_empty_patch(self):
        assert CampaignUpdate().changes() == {}


class TestTokenUsage:
    """Tests for TokenUsage."""

    def test_total_defaults_to_sum(self):
        usage = TokenUsage(type=AiGenerationType.COPY_GENERATION, input_tokens=120, output_tokens=80)

        assert usage.total == 200

    def test_explicit_total_wins(self):
        usage = TokenUsage(
            type=AiGenerationType.IMAGE_GENERATION, input_tokens=10, output_tokens=0, total_tokens=1000
        )

        assert usage.total == 1000

    def test_negative_tokens_rejected(self):
        with pytest.raises(ValidationError):
            TokenUsage(type=AiGenerationType.COPY_GENERATION, input_tokens=-1)
