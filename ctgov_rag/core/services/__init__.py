"""Engine services: chunking, scoring, selection, summaries, citations."""

from .chunker import chunk, chunk_documents
from .citations import extract_citations
from .pipeline_service import RAGPipelineService, build_effective_query, run_pipeline
from .scorer import score_chunk, tokenize
from .selector import select_top_k
from .summarizer import NO_MATCH_MESSAGE, TRUNCATION_MARKER, summarize

__all__ = [
    "chunk",
    "chunk_documents",
    "score_chunk",
    "tokenize",
    "select_top_k",
    "summarize",
    "extract_citations",
    "run_pipeline",
    "build_effective_query",
    "RAGPipelineService",
    "NO_MATCH_MESSAGE",
    "TRUNCATION_MARKER",
]
