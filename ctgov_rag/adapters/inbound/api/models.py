"""Pydantic models for API requests and responses."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ....core.domain import Document, DocumentMetadata


class MetadataIn(BaseModel):
    """Known metadata fields of an inline document."""

    title: str | None = Field(None, description="Document title")
    content_type: str | None = Field(None, description="Kind of document, e.g. clinical_trial")
    has_results: bool = Field(False, description="Parent record has a results section")
    has_adverse_events: bool = Field(False, description="Parent record has adverse-event data")


class DocumentIn(BaseModel):
    """A document supplied inline instead of fetched from ClinicalTrials.gov."""

    source_id: str = Field(..., min_length=1, description="Stable document identifier")
    text: str = Field(..., description="Plain-text content")
    metadata: MetadataIn = Field(default_factory=MetadataIn)

    def to_domain(self) -> Document:
        """Convert to the engine's Document."""
        return Document(
            source_id=self.source_id,
            text=self.text,
            metadata=DocumentMetadata(**self.metadata.model_dump()),
        )


class AnalyzeRequest(BaseModel):
    """Request model for the retrieval-and-summarization pipeline.

    Engine parameters left unset fall back to the configured defaults;
    their validity is checked by the engine itself.
    """

    query: str | None = Field(
        None,
        max_length=1000,
        description="Free-text query",
        json_schema_extra={"example": "bleeding risk"},
    )
    drug: str | None = Field(None, max_length=200, description="Drug or intervention name")
    condition: str | None = Field(None, max_length=200, description="Medical condition")
    documents: list[DocumentIn] | None = Field(
        None, description="Inline documents; when omitted, studies are fetched"
    )
    top_k: int | None = Field(None, description="Number of chunks to select (1-10)")
    chunk_size: int | None = Field(None, description="Window width in characters")
    overlap: int | None = Field(None, description="Overlap between windows in characters")
    keyword_boosts: list[str] = Field(
        default_factory=list, description="Extra boost keywords, added to the defaults"
    )
    summary_max_length: int | None = Field(None, description="Summary character budget")
    limit: int | None = Field(
        None, ge=1, le=100, description="Maximum studies to fetch (default: STUDY_LIMIT)"
    )
    completed_only: bool = Field(False, description="Fetch completed studies only")


class TopChunkOut(BaseModel):
    """A selected chunk in the response."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    source_id: str = Field(..., alias="sourceId")
    text: str
    start_offset: int = Field(..., alias="startOffset")
    end_offset: int = Field(..., alias="endOffset")
    metadata: dict[str, Any]
    score: float | None


class CitationOut(BaseModel):
    """Provenance of selected chunks from one document."""

    model_config = ConfigDict(populate_by_name=True)

    source_id: str = Field(..., alias="sourceId")
    ranges: list[tuple[int, int]]


class AnalyzeResponse(BaseModel):
    """Structured pipeline result."""

    model_config = ConfigDict(populate_by_name=True)

    source: str
    query: str | None
    drug: str | None
    condition: str | None
    top_chunks: list[TopChunkOut] = Field(..., alias="topChunks")
    summary: str
    citations: list[CitationOut]


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="API version")


class ErrorDetail(BaseModel):
    """Structured error detail information."""

    type: str = Field(..., description="Exception type name")
    code: str = Field(..., description="Error code (e.g., RAG_CFG_002)")
    message: str = Field(..., description="Human-readable error message")


class ErrorResponse(BaseModel):
    """Error body returned by the global exception handlers."""

    error: ErrorDetail
    location: dict[str, Any] | None = None
    context: dict[str, Any] | None = None
