"""Pipeline options, provider requests and results."""

from dataclasses import dataclass, field
from typing import Any

from .document import Chunk, Citation
from .exceptions import InvalidConfigurationError

MIN_TOP_K = 1
MAX_TOP_K = 10

# Domain terms that earn a keyword boost. English plus Chinese equivalents,
# since trial records and questions arrive in both languages.
DEFAULT_DOMAIN_KEYWORDS: tuple[str, ...] = (
    "adverse events",
    "adverse reaction",
    "serious",
    "safety",
    "side effects",
    "toxicity",
    "tolerability",
    "不良事件",
    "不良反应",
    "安全性",
    "副作用",
)


@dataclass(frozen=True)
class PipelineOptions:
    """Parameters of one pipeline invocation.

    Attributes:
        top_k: Number of chunks to select, in ``[1, 10]``.
        chunk_size: Window width in characters.
        overlap: Characters shared by consecutive windows.
        keyword_boosts: Caller-supplied boost keywords, unioned with
            ``default_keywords``.
        default_keywords: Built-in domain keywords.
        summary_max_length: Character budget of the summary.
        keyword_boost: Score increment per boost keyword found.
        metadata_boost: Score increment for safety-relevant documents.
    """

    top_k: int = 5
    chunk_size: int = 1000
    overlap: int = 200
    keyword_boosts: tuple[str, ...] = ()
    default_keywords: tuple[str, ...] = DEFAULT_DOMAIN_KEYWORDS
    summary_max_length: int = 1200
    keyword_boost: float = 2.0
    metadata_boost: float = 1.0

    def validate(self) -> None:
        """Reject invalid parameters before any work is done.

        Raises:
            InvalidConfigurationError: On the first invalid parameter.
        """
        if self.chunk_size <= 0:
            raise InvalidConfigurationError(
                "chunk_size must be positive", context={"chunk_size": self.chunk_size}
            )
        if self.overlap < 0 or self.overlap >= self.chunk_size:
            raise InvalidConfigurationError(
                "overlap must satisfy 0 <= overlap < chunk_size",
                context={"chunk_size": self.chunk_size, "overlap": self.overlap},
            )
        if not MIN_TOP_K <= self.top_k <= MAX_TOP_K:
            raise InvalidConfigurationError(
                f"top_k must be between {MIN_TOP_K} and {MAX_TOP_K}",
                context={"top_k": self.top_k},
            )
        if self.summary_max_length <= 0:
            raise InvalidConfigurationError(
                "summary_max_length must be positive",
                context={"summary_max_length": self.summary_max_length},
            )

    def effective_keywords(self) -> list[str]:
        """Defaults followed by caller additions, deduplicated case-insensitively."""
        seen: set[str] = set()
        keywords: list[str] = []
        for keyword in (*self.default_keywords, *self.keyword_boosts):
            key = keyword.strip().lower()
            if key and key not in seen:
                seen.add(key)
                keywords.append(key)
        return keywords


@dataclass(frozen=True)
class DocumentRequest:
    """What a document provider is asked for in one analysis call."""

    query: str | None = None
    drug: str | None = None
    condition: str | None = None
    limit: int = 10
    completed_only: bool = False


@dataclass
class RAGResult:
    """Outcome of one pipeline invocation.

    An empty ``top_chunks`` with a no-match ``summary`` means the pipeline
    ran and found nothing; failures are raised, never encoded here.
    """

    source: str
    query: str | None
    drug: str | None
    condition: str | None
    top_chunks: list[Chunk] = field(default_factory=list)
    summary: str = ""
    citations: list[Citation] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when no chunk matched."""
        return not self.top_chunks

    def to_dict(self, max_text_length: int | None = None, marker: str = "") -> dict[str, Any]:
        """Serialize to the stable structured record.

        Args:
            max_text_length: Cap applied to each top chunk's text.
            marker: Truncation marker appended to capped chunk text.
        """
        return {
            "source": self.source,
            "query": self.query,
            "drug": self.drug,
            "condition": self.condition,
            "topChunks": [chunk.to_dict(max_text_length, marker) for chunk in self.top_chunks],
            "summary": self.summary,
            "citations": [citation.to_dict() for citation in self.citations],
        }
