"""Domain models for the ClinicalTrials.gov RAG engine.

- document: Document, DocumentMetadata, Chunk and Citation
- pipeline: PipelineOptions, DocumentRequest and RAGResult

All models are re-exported here:

    from ctgov_rag.core.domain import Chunk, Document, RAGResult
"""

from .document import Chunk, Citation, Document, DocumentMetadata
from .pipeline import (
    DEFAULT_DOMAIN_KEYWORDS,
    MAX_TOP_K,
    MIN_TOP_K,
    DocumentRequest,
    PipelineOptions,
    RAGResult,
)

__all__ = [
    # Document models
    "Document",
    "DocumentMetadata",
    "Chunk",
    "Citation",
    # Pipeline models
    "PipelineOptions",
    "DocumentRequest",
    "RAGResult",
    "DEFAULT_DOMAIN_KEYWORDS",
    "MIN_TOP_K",
    "MAX_TOP_K",
]
