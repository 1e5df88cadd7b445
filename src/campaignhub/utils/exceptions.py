"""Custom exceptions for campaignhub."""


class CampaignHubError(Exception):
    """Base exception for all campaignhub errors."""

    pass


class ConfigurationError(CampaignHubError):
    """Error in configuration or settings."""

    pass
