"""Analysis endpoints: retrieval pipeline, safety profile and adverse-event comparison."""

import logging
from typing import Any

from fastapi import APIRouter, Query

from .....config.settings import settings
from .....core.services.pipeline_service import RAGPipelineService
from .....core.services.summarizer import TRUNCATION_MARKER
from ....outbound.document_providers import StaticDocumentProvider
from ..deps import get_pipeline_service, get_safety_service
from ..models import AnalyzeRequest, AnalyzeResponse, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["analysis"])

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Invalid configuration or input"},
    502: {"model": ErrorResponse, "description": "ClinicalTrials.gov request failed"},
}


@router.post("/analyze", response_model=AnalyzeResponse, responses=ERROR_RESPONSES)
def analyze(request: AnalyzeRequest) -> AnalyzeResponse:
    """Run the retrieval-and-summarization pipeline.

    Inline ``documents`` are analysed as given; otherwise matching studies
    are fetched from ClinicalTrials.gov. An empty ``topChunks`` means no
    content matched, not a failure.
    """
    options = settings.pipeline_options(
        request.keyword_boosts,
        top_k=request.top_k,
        chunk_size=request.chunk_size,
        overlap=request.overlap,
        summary_max_length=request.summary_max_length,
    )

    if request.documents is not None:
        provider = StaticDocumentProvider([doc.to_domain() for doc in request.documents])
        service = RAGPipelineService(provider, source=settings.result_source_tag)
    else:
        service = get_pipeline_service()

    result = service.analyze(
        query=request.query,
        drug=request.drug,
        condition=request.condition,
        options=options,
        limit=request.limit or settings.study_limit,
        completed_only=request.completed_only,
    )
    logger.info(f"Analysis returned {len(result.top_chunks)} chunks")

    return AnalyzeResponse.model_validate(
        result.to_dict(max_text_length=options.summary_max_length, marker=TRUNCATION_MARKER)
    )


@router.get("/safety-profile", responses=ERROR_RESPONSES)
def safety_profile(
    drug: str = Query(..., min_length=1, description="Drug to analyse"),
    condition: str | None = Query(None, description="Medical condition context"),
    completed_only: bool = Query(True, description="Only completed studies with results"),
    limit: int = Query(20, ge=1, le=100, description="Maximum studies to analyse"),
) -> dict[str, Any]:
    """Aggregate adverse events for a drug across clinical trials."""
    return get_safety_service().analyze(
        drug, condition=condition, completed_only=completed_only, limit=limit
    )


@router.get("/adverse-events/compare", responses=ERROR_RESPONSES)
def compare_adverse_events(
    drug: str = Query(..., min_length=1, description="Drug to compare"),
    control_type: str = Query(
        "placebo", description="Comparator: placebo, active_control or dose_comparison"
    ),
    condition: str | None = Query(None, description="Medical condition context"),
    limit: int = Query(10, ge=1, le=50, description="Maximum studies to fetch"),
) -> dict[str, Any]:
    """Collect per-study adverse-event data of a drug against a control type."""
    return get_safety_service().compare_adverse_events(
        drug, control_type=control_type, condition=condition, limit=limit
    )
