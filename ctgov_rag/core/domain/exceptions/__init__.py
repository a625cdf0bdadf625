"""Exception hierarchy for the ClinicalTrials.gov RAG engine.

Import from this package directly:

    from ctgov_rag.core.domain.exceptions import CTGovRAGError, InvalidConfigurationError
"""

# Base classes
from .base import CTGovRAGError, ExceptionContext

# Configuration exceptions
from .configuration import ConfigurationError, InvalidConfigurationError

# Document provider exceptions
from .provider import (
    DocumentAssemblyError,
    DocumentProviderError,
    StudyNotFoundError,
    UpstreamAPIError,
)

# Validation exceptions
from .validation import InvalidControlTypeError, MissingDrugNameError, ValidationError

__all__ = [
    # Base
    "ExceptionContext",
    "CTGovRAGError",
    # Configuration
    "ConfigurationError",
    "InvalidConfigurationError",
    # Provider
    "DocumentProviderError",
    "UpstreamAPIError",
    "DocumentAssemblyError",
    "StudyNotFoundError",
    # Validation
    "ValidationError",
    "MissingDrugNameError",
    "InvalidControlTypeError",
]
