"""Configuration for campaignhub."""

from .settings import AiProvider, Settings, get_settings

__all__ = [
    "AiProvider",
    "Settings",
    "get_settings",
]
