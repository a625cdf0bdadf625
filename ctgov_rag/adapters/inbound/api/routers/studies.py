"""Study lookup endpoint."""

import logging
from typing import Any

from fastapi import APIRouter, Path

from ..deps import get_study_provider
from ..models import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["studies"])


@router.get(
    "/studies/{nct_id}",
    responses={
        404: {"model": ErrorResponse, "description": "No study with this NCT ID"},
        502: {"model": ErrorResponse, "description": "ClinicalTrials.gov request failed"},
    },
)
def get_study(
    nct_id: str = Path(..., pattern=r"^NCT\d{8}$", description="ClinicalTrials.gov NCT ID"),
) -> dict[str, Any]:
    """Return one study as the document the engine would analyse, plus its raw record."""
    document, study = get_study_provider().get_study_document(nct_id)
    logger.info(
        f"Study {nct_id}: {len(document.text)} characters of text", extra={"nct_id": nct_id}
    )
    return {"nct_id": nct_id, "document": document.to_dict(), "study": study}
