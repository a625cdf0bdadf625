"""Document provider exceptions.

These come from the collaborators that supply documents to the engine and
are kept apart from configuration errors so callers can tell them apart.
"""

from .base import CTGovRAGError


class DocumentProviderError(CTGovRAGError):
    """Failed to obtain documents for an analysis call."""

    error_code = "RAG_PRV_001"


class UpstreamAPIError(DocumentProviderError):
    """ClinicalTrials.gov returned an error or could not be reached.

    Common causes:
    - Network connectivity issues
    - Invalid query parameters (HTTP 400)
    - Unknown NCT ID (HTTP 404)
    """

    error_code = "RAG_PRV_002"


class DocumentAssemblyError(DocumentProviderError):
    """A study record could not be turned into a document."""

    error_code = "RAG_PRV_003"


class StudyNotFoundError(DocumentProviderError):
    """ClinicalTrials.gov has no study with the requested NCT ID."""

    error_code = "RAG_PRV_004"
