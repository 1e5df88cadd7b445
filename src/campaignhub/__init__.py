"""campaignhub - multi-tenant marketing campaign backend."""

__version__ = "0.1.0"
