"""Configuration-related exceptions."""

from .base import CTGovRAGError


class ConfigurationError(CTGovRAGError):
    """Configuration or environment errors.

    Raised before any pipeline work starts; callers never receive a
    degraded result for a bad configuration.
    """

    error_code = "RAG_CFG_001"


class InvalidConfigurationError(ConfigurationError):
    """A pipeline parameter (chunk size, overlap, top-k, summary length) is invalid."""

    error_code = "RAG_CFG_002"
