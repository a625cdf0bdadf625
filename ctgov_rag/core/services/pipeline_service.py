"""Retrieval-and-summarization pipeline.

``run_pipeline`` is the engine: a pure, in-memory transformation of a
document batch into a ``RAGResult``. ``RAGPipelineService`` adds the
document provider in front of it.
"""

import logging

from ..domain import Document, DocumentRequest, PipelineOptions, RAGResult
from ..ports.document_provider_port import DocumentProviderPort
from .chunker import chunk_documents
from .citations import extract_citations
from .scorer import score_chunks
from .selector import select_top_k
from .summarizer import summarize

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_TAG = "clinicaltrials.gov"


def build_effective_query(
    query: str | None = None,
    drug: str | None = None,
    condition: str | None = None,
) -> str:
    """Space-join the query parts that are present and non-blank."""
    return " ".join(part.strip() for part in (query, drug, condition) if part and part.strip())


def run_pipeline(
    documents: list[Document],
    options: PipelineOptions,
    *,
    query: str | None = None,
    drug: str | None = None,
    condition: str | None = None,
    source: str = DEFAULT_SOURCE_TAG,
) -> RAGResult:
    """Chunk, score, select, summarize and cite.

    Args:
        documents: Documents in arrival order.
        options: Pipeline parameters; validated before any work.
        query: Free-text query.
        drug: Drug name, folded into the effective query.
        condition: Condition, folded into the effective query.
        source: Provenance tag echoed in the result.

    Returns:
        RAGResult. When there are no documents or no chunk scores above
        zero, ``top_chunks`` and ``citations`` are empty and ``summary``
        says so.

    Raises:
        InvalidConfigurationError: If ``options`` are invalid.
    """
    options.validate()

    effective_query = build_effective_query(query, drug, condition)
    chunks = chunk_documents(documents, options.chunk_size, options.overlap)
    scored = score_chunks(
        chunks,
        effective_query,
        options.effective_keywords(),
        keyword_boost=options.keyword_boost,
        metadata_boost=options.metadata_boost,
    )
    candidates = [chunk for chunk in scored if chunk.score and chunk.score > 0]
    selected = select_top_k(candidates, options.top_k)

    logger.debug(
        f"Pipeline: {len(documents)} documents, {len(chunks)} chunks, "
        f"{len(candidates)} matching, {len(selected)} selected"
    )
    if not selected:
        logger.info(f"No matching content for query '{effective_query}'")

    return RAGResult(
        source=source,
        query=query,
        drug=drug,
        condition=condition,
        top_chunks=selected,
        summary=summarize(selected, options.summary_max_length),
        citations=extract_citations(selected),
    )


class RAGPipelineService:
    """Runs the pipeline over documents obtained from a provider."""

    def __init__(
        self,
        provider: DocumentProviderPort,
        default_options: PipelineOptions | None = None,
        source: str = DEFAULT_SOURCE_TAG,
    ) -> None:
        """Initialize the service.

        Args:
            provider: Supplies the documents of each call.
            default_options: Options used when a call passes none.
            source: Provenance tag echoed in every result.
        """
        self.provider = provider
        self.default_options = default_options or PipelineOptions()
        self.source = source

    def analyze(
        self,
        *,
        query: str | None = None,
        drug: str | None = None,
        condition: str | None = None,
        options: PipelineOptions | None = None,
        limit: int = 10,
        completed_only: bool = False,
    ) -> RAGResult:
        """Fetch documents and run the pipeline over them.

        Options are validated before the provider is called, so a bad
        configuration never triggers upstream requests. Provider errors
        propagate unchanged.

        Args:
            query: Free-text query.
            drug: Drug name.
            condition: Medical condition.
            options: Pipeline parameters (defaults to the service's).
            limit: Maximum number of documents to request.
            completed_only: Ask the provider for completed studies only.

        Returns:
            The pipeline result.
        """
        options = options or self.default_options
        options.validate()

        request = DocumentRequest(
            query=query,
            drug=drug,
            condition=condition,
            limit=limit,
            completed_only=completed_only,
        )
        documents = self.provider.get_documents(request)
        logger.info(f"Provider returned {len(documents)} documents")

        return run_pipeline(
            documents,
            options,
            query=query,
            drug=drug,
            condition=condition,
            source=self.source,
        )
