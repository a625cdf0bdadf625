"""FastAPI dependency wiring."""

import logging
from functools import lru_cache

from ....config.settings import settings
from ....core.services.pipeline_service import RAGPipelineService
from ....core.services.safety_profile import SafetyProfileService
from ...outbound.data_sources.clinicaltrials_adapter import ClinicalTrialsGovAdapter
from ...outbound.document_providers import ClinicalTrialsGovDocumentProvider

logger = logging.getLogger(__name__)


@lru_cache
def get_ctgov_client() -> ClinicalTrialsGovAdapter:
    """Get or create the ClinicalTrials.gov client singleton."""
    logger.info("Initializing ClinicalTrialsGovAdapter...")
    return ClinicalTrialsGovAdapter(
        base_url=settings.ctgov_base_url,
        timeout=settings.request_timeout,
        user_agent=settings.user_agent,
    )


@lru_cache
def get_study_provider() -> ClinicalTrialsGovDocumentProvider:
    """Get or create the ClinicalTrials.gov document provider."""
    return ClinicalTrialsGovDocumentProvider(get_ctgov_client())


@lru_cache
def get_pipeline_service() -> RAGPipelineService:
    """Get or create the pipeline service backed by ClinicalTrials.gov."""
    logger.info("Initializing RAGPipelineService...")
    return RAGPipelineService(
        get_study_provider(),
        default_options=settings.pipeline_options(),
        source=settings.result_source_tag,
    )


@lru_cache
def get_safety_service() -> SafetyProfileService:
    """Get or create the safety profile service."""
    logger.info("Initializing SafetyProfileService...")
    return SafetyProfileService(get_ctgov_client())
