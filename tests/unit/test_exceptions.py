"""Unit tests for domain exceptions and the principal."""

from uuid import uuid4

import pytest

from campaignhub.core.exceptions import AuthenticationError, ForbiddenError, NotFoundError
from campaignhub.core.principal import Principal
from campaignhub.db.storage.exceptions import (
    ConstraintViolationError,
    QueryValidationError,
    RecordNotFoundError,
    StorageError,
)
from campaignhub.utils.exceptions import CampaignHubError, ConfigurationError


class TestHierarchy:
    """Tests for the exception hierarchy."""

    @pytest.mark.parametrize(
        "exc_type",
        [
            ForbiddenError,
            NotFoundError,
            AuthenticationError,
            StorageError,
            ConfigurationError,
        ],
    )
    def test_rooted_at_campaignhub_error(self, exc_type):
        assert issubclass(exc_type, CampaignHubError)

    @pytest.mark.parametrize(
        "exc_type", [RecordNotFoundError, ConstraintViolationError, QueryValidationError]
    )
    def test_storage_errors(self, exc_type):
        assert issubclass(exc_type, StorageError)


class TestMessages:
    """Tests for exception attributes and rendering."""

    def test_not_found(self):
        campaign_id = uuid4()
        exc = NotFoundError("Campaign", campaign_id)

        assert exc.resource == "Campaign"
        assert exc.resource_id == campaign_id
        assert str(exc) == f"NotFoundError: Campaign not found: {campaign_id}"

    def test_forbidden(self):
        exc = ForbiddenError("user-1")

        assert exc.subject == "user-1"
        assert "no accessible workspace" in str(exc)

    def test_storage_error_context(self):
        exc = StorageError("db down", "Campaign", "find_many")

        assert str(exc) == "StorageError: db down (model=Campaign, action=find_many)"

    def test_record_not_found_keeps_filter(self):
        exc = RecordNotFoundError("Campaign", "update", {"id": "c1"})

        assert exc.where == {"id": "c1"}
        assert exc.model == "Campaign"
        assert exc.action == "update"


class TestPrincipal:
    """Tests for Principal."""

    def test_frozen(self):
        principal = Principal(subject="user-1")

        with pytest.raises(AttributeError):
            principal.subject = "user-2"

    def test_empty_subject_rejected(self):
        with pytest.raises(ValueError, match="must not be empty"):
            Principal(subject="")
