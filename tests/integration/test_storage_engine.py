"""Integration tests for the storage engine through a middleware-free client."""

from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio
from sqlalchemy import inspect

from campaignhub.db.models import Campaign, CampaignStatus
from campaignhub.db.models.registry import ModelName
from campaignhub.db.storage.exceptions import (
    ConstraintViolationError,
    QueryValidationError,
    RecordNotFoundError,
)
from campaignhub.db.storage.types import QueryAction, QueryParams


@pytest_asyncio.fixture
async def workspace(raw_client):
    return await raw_client.workspace.create(data={"name": "Acme"})


@pytest_asyncio.fixture
async def campaigns(raw_client, workspace):
    """Three campaigns with distinct creation times, oldest first."""
    base = datetime(2026, 1, 1, tzinfo=UTC)
    created = []
    for index, name in enumerate(["Alpha", "Bravo", "Charlie"]):
        created.append(
            await raw_client.campaign.create(
                data={
                    "workspace_id": workspace.id,
                    "name": name,
                    "created_by": "user-1",
                    "created_at": base + timedelta(days=index),
                }
            )
        )
    return created


class TestReads:
    """Tests for find_many/find_first/find_unique/count."""

    @pytest.mark.asyncio
    async def test_find_many_filters_and_orders(self, raw_client, campaigns):
        rows = await raw_client.campaign.find_many(
            where={"name": {"in": ["Alpha", "Charlie"]}},
            order_by={"created_at": "desc"},
        )

        assert [row.name for row in rows] == ["Charlie", "Alpha"]
        assert all(isinstance(row, Campaign) for row in rows)

    @pytest.mark.asyncio
    async def test_take_and_skip(self, raw_client, campaigns):
        rows = await raw_client.campaign.find_many(order_by={"created_at": "asc"}, take=1, skip=1)

        assert [row.name for row in rows] == ["Bravo"]

    @pytest.mark.asyncio
    async def test_find_first_and_unique(self, raw_client, campaigns):
        first = await raw_client.campaign.find_first(order_by={"created_at": "asc"})
        unique = await raw_client.campaign.find_unique(where={"id": campaigns[2].id})

        assert first.name == "Alpha"
        assert unique.name == "Charlie"

    @pytest.mark.asyncio
    async def test_find_unique_missing_returns_none(self, raw_client, campaigns):
        assert await raw_client.campaign.find_unique(where={"name": "Zulu"}) is None

    @pytest.mark.asyncio
    async def test_find_unique_ambiguous_raises(self, raw_client, campaigns):
        with pytest.raises(QueryValidationError, match="more than one row"):
            await raw_client.campaign.find_unique(where={"created_by": "user-1"})

    @pytest.mark.asyncio
    async def test_count(self, raw_client, campaigns):
        assert await raw_client.campaign.count() == 3
        assert await raw_client.campaign.count(where={"name": {"starts_with": "B"}}) == 1

    @pytest.mark.asyncio
    async def test_select_returns_mappings(self, raw_client, campaigns, workspace):
        rows = await raw_client.campaign.find_many(
            select={"name": True, "workspace_id": True}, order_by={"name": "asc"}
        )

        assert rows[0] == {"name": "Alpha", "workspace_id": workspace.id}

    @pytest.mark.asyncio
    async def test_select_and_include_conflict(self, raw_client, campaigns):
        with pytest.raises(QueryValidationError, match="cannot be combined"):
            await raw_client.campaign.find_many(
                select={"name": True}, include={"ad_creatives": True}
            )

    @pytest.mark.asyncio
    async def test_include_and_count(self, raw_client, campaigns):
        """Test relation includes load rows and _count annotates each row."""
        for headline in ("One", "Two"):
            await raw_client.ad_creative.create(
                data={"campaign_id": campaigns[0].id, "headline": headline}
            )

        loaded = await raw_client.campaign.find_unique(
            where={"id": campaigns[0].id}, include={"ad_creatives": True}
        )
        counted = await raw_client.campaign.find_many(
            include={"_count": {"select": {"ad_creatives": True}}},
            order_by={"created_at": "asc"},
        )

        assert sorted(c.headline for c in loaded.ad_creatives) == ["One", "Two"]
        assert [c.relation_counts["ad_creatives"] for c in counted] == [2, 0, 0]

    @pytest.mark.asyncio
    async def test_relation_filter(self, raw_client, campaigns):
        creative = await raw_client.ad_creative.create(
            data={"campaign_id": campaigns[1].id, "headline": "Hello"}
        )

        rows = await raw_client.ad_creative.find_many(where={"campaign": {"is": {"name": "Bravo"}}})

        assert [row.id for row in rows] == [creative.id]


class TestSessionConsistency:
    """Rows returned earlier stay usable and current after later calls."""

    @pytest.mark.asyncio
    async def test_included_relation_survives_later_reads(self, raw_client, campaigns):
        await raw_client.ad_creative.create(
            data={"campaign_id": campaigns[0].id, "headline": "One"}
        )
        loaded = await raw_client.campaign.find_unique(
            where={"id": campaigns[0].id}, include={"ad_creatives": True}
        )

        await raw_client.campaign.find_many()
        await raw_client.campaign.update(where={"id": campaigns[0].id}, data={"name": "Renamed"})

        assert [c.headline for c in loaded.ad_creatives] == ["One"]
        assert loaded.name == "Renamed"

    @pytest.mark.asyncio
    async def test_include_reloads_changed_collection(self, raw_client, campaigns):
        first = await raw_client.campaign.find_unique(
            where={"id": campaigns[0].id}, include={"ad_creatives": True}
        )
        assert first.ad_creatives == []

        await raw_client.ad_creative.create(
            data={"campaign_id": campaigns[0].id, "headline": "Late"}
        )
        again = await raw_client.campaign.find_unique(
            where={"id": campaigns[0].id}, include={"ad_creatives": True}
        )

        assert again is first
        assert [c.headline for c in again.ad_creatives] == ["Late"]

    @pytest.mark.asyncio
    async def test_to_one_include(self, raw_client, campaigns):
        creative = await raw_client.ad_creative.create(
            data={"campaign_id": campaigns[1].id, "headline": "Hello"}
        )

        loaded = await raw_client.ad_creative.find_unique(
            where={"id": creative.id}, include={"campaign": True}
        )

        assert loaded.campaign.name == "Bravo"

    @pytest.mark.asyncio
    async def test_update_many_updates_loaded_rows(self, raw_client, campaigns):
        await raw_client.campaign.update_many(
            where={"name": {"in": ["Alpha", "Bravo"]}}, data={"status": "PAUSED"}
        )

        assert [c.status for c in campaigns] == ["PAUSED", "PAUSED", "DRAFT"]

    @pytest.mark.asyncio
    async def test_delete_many_detaches_loaded_rows(self, raw_client, campaigns):
        await raw_client.campaign.delete_many(where={"name": "Alpha"})

        assert inspect(campaigns[0]).detached
        assert not inspect(campaigns[1]).detached


class TestWrites:
    """Tests for create/update/upsert/delete."""

    @pytest.mark.asyncio
    async def test_create_applies_defaults(self, raw_client, workspace):
        campaign = await raw_client.campaign.create(
            data={"workspace_id": workspace.id, "name": "New", "created_by": "user-1"}
        )

        assert campaign.id is not None
        assert campaign.status == CampaignStatus.DRAFT.value
        assert campaign.created_at is not None
        assert campaign.deleted_at is None

    @pytest.mark.asyncio
    async def test_update_single_row(self, raw_client, campaigns):
        updated = await raw_client.campaign.update(
            where={"id": campaigns[0].id}, data={"status": CampaignStatus.ACTIVE}
        )

        assert updated.id == campaigns[0].id
        assert updated.status == "ACTIVE"

    @pytest.mark.asyncio
    async def test_update_missing_raises(self, raw_client, campaigns):
        with pytest.raises(RecordNotFoundError) as exc_info:
            await raw_client.campaign.update(where={"name": "Zulu"}, data={"name": "x"})

        assert exc_info.value.model == "Campaign"
        assert exc_info.value.action == "update"

    @pytest.mark.asyncio
    async def test_update_many_returns_count(self, raw_client, campaigns):
        result = await raw_client.campaign.update_many(
            where={"name": {"not_in": ["Alpha"]}}, data={"status": "PAUSED"}
        )
        paused = await raw_client.campaign.count(where={"status": "PAUSED"})

        assert result == {"count": 2}
        assert paused == 2

    @pytest.mark.asyncio
    async def test_upsert_creates_then_updates(self, raw_client, workspace):
        key = {"workspace_id": workspace.id, "provider": "META", "external_id": "act_1"}

        created = await raw_client.integration.upsert(
            where=key, create={**key, "access_token": "t1"}, update={"access_token": "t1"}
        )
        updated = await raw_client.integration.upsert(
            where=key, create={**key, "access_token": "t2"}, update={"access_token": "t2"}
        )

        assert updated.id == created.id
        assert updated.access_token == "t2"
        assert await raw_client.integration.count() == 1

    @pytest.mark.asyncio
    async def test_physical_delete(self, raw_client, campaigns):
        deleted = await raw_client.campaign.delete(where={"id": campaigns[0].id})

        assert deleted.id == campaigns[0].id
        assert await raw_client.campaign.count() == 2

    @pytest.mark.asyncio
    async def test_delete_many_returns_count(self, raw_client, campaigns):
        result = await raw_client.campaign.delete_many(where={"name": {"in": ["Alpha", "Bravo"]}})

        assert result == {"count": 2}
        assert await raw_client.campaign.count() == 1

    @pytest.mark.asyncio
    async def test_unique_violation(self, raw_client, workspace):
        await raw_client.workspace_member.create(
            data={"workspace_id": workspace.id, "user_id": "user-1"}
        )

        with pytest.raises(ConstraintViolationError) as exc_info:
            await raw_client.workspace_member.create(
                data={"workspace_id": workspace.id, "user_id": "user-1"}
            )

        assert exc_info.value.model == "WorkspaceMember"
        assert exc_info.value.action == "create"


class TestValidation:
    """Tests for descriptor validation."""

    @pytest.mark.asyncio
    async def test_unknown_argument(self, raw_client):
        with pytest.raises(QueryValidationError, match="Unsupported arguments"):
            await raw_client.dispatch(
                QueryParams(ModelName.CAMPAIGN, QueryAction.COUNT, {"take": 1})
            )

    @pytest.mark.asyncio
    async def test_unknown_field_in_data(self, raw_client, workspace):
        with pytest.raises(QueryValidationError, match="Unknown field 'budget'"):
            await raw_client.campaign.create(
                data={"workspace_id": workspace.id, "name": "x", "created_by": "u", "budget": 5}
            )

    @pytest.mark.asyncio
    async def test_update_requires_where(self, raw_client):
        with pytest.raises(QueryValidationError, match="requires a where filter"):
            await raw_client.campaign.update(where={}, data={"name": "x"})

    @pytest.mark.asyncio
    async def test_empty_data_rejected(self, raw_client, workspace):
        with pytest.raises(QueryValidationError, match="must not be empty"):
            await raw_client.campaign.update(where={"id": workspace.id}, data={})

    def test_delegates_cover_every_model(self, raw_client):
        for name in ModelName:
            assert raw_client.delegate(name).model == name
        assert raw_client.ad_creative.model == ModelName.AD_CREATIVE
