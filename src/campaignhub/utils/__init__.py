"""Utility modules for campaignhub."""

from campaignhub.utils.exceptions import CampaignHubError, ConfigurationError

__all__ = [
    "CampaignHubError",
    "ConfigurationError",
]
