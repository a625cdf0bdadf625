"""FastAPI application for the ClinicalTrials.gov RAG engine."""

import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ....config.logging import configure_logging
from ....config.settings import settings
from ....core.domain.exceptions import CTGovRAGError
from ...common.exception_handler import (
    format_exception_json,
    get_http_status_code,
    log_exception,
)
from .routers import analysis, health, studies

configure_logging(settings)
logger = logging.getLogger(__name__)

# Determine if we're in debug mode (shows full stack traces)
DEBUG_MODE = os.getenv("DEBUG", "false").lower() == "true"

app = FastAPI(
    title="ctgov-rag API",
    description=(
        "Retrieval and extractive summarization over ClinicalTrials.gov study records, "
        "with citations back to the source studies."
    ),
    version=health.API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.include_router(health.router)
app.include_router(analysis.router)
app.include_router(studies.router)


# =============================================================================
# Global Exception Handlers
# =============================================================================


@app.exception_handler(CTGovRAGError)
async def ctgov_rag_error_handler(request: Request, exc: CTGovRAGError) -> JSONResponse:
    """Return engine and provider errors as structured JSON."""
    log_exception(exc, extra_context={"path": str(request.url.path), "method": request.method})

    return JSONResponse(
        status_code=get_http_status_code(exc),
        content=exc.to_dict(include_trace=DEBUG_MODE),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return unhandled exceptions as structured JSON."""
    log_exception(exc, extra_context={"path": str(request.url.path), "method": request.method})

    return JSONResponse(
        status_code=get_http_status_code(exc),
        content=format_exception_json(exc, include_trace=DEBUG_MODE),
    )


logger.info(f"Debug mode: {'ENABLED' if DEBUG_MODE else 'DISABLED'}")
