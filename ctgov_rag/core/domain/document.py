"""Document, chunk and citation models for the retrieval engine."""

from dataclasses import dataclass, field, replace
from typing import Any

_TRUE_STRINGS = frozenset({"true", "1", "yes", "y", "on"})
_FALSE_STRINGS = frozenset({"false", "0", "no", "n", "off", ""})


def _as_bool(value: Any) -> bool:
    """Read a metadata flag given as a bool, number, string or None.

    Raises:
        ValueError: If a string is not a recognised boolean spelling.
    """
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
        raise ValueError(f"Not a boolean flag: {value!r}")
    return bool(value)


@dataclass(frozen=True)
class DocumentMetadata:
    """Known metadata fields of a source document.

    Only the fields the scorer and summarizer read are modelled; there is
    no open-ended key/value bag.

    Attributes:
        title: Human-readable title (e.g. the study's brief title).
        content_type: Kind of document, e.g. ``"clinical_trial"``.
        has_results: The parent record carries a results section.
        has_adverse_events: The parent record carries adverse-event data.
    """

    title: str | None = None
    content_type: str | None = None
    has_results: bool = False
    has_adverse_events: bool = False

    @property
    def safety_relevant(self) -> bool:
        """Whether chunks of this document get the metadata boost."""
        return self.has_results or self.has_adverse_events

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dictionary."""
        return {
            "title": self.title,
            "contentType": self.content_type,
            "hasResults": self.has_results,
            "hasAdverseEvents": self.has_adverse_events,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "DocumentMetadata":
        """Build metadata from a mapping, accepting camelCase or snake_case keys.

        Flags may be JSON booleans or strings such as ``"false"``.

        Raises:
            ValueError: If a flag string is not a boolean spelling.
        """
        data = data or {}

        def pick(*keys: str) -> Any:
            for key in keys:
                if key in data:
                    return data[key]
            return None

        return cls(
            title=pick("title"),
            content_type=pick("content_type", "contentType"),
            has_results=_as_bool(pick("has_results", "hasResults")),
            has_adverse_events=_as_bool(pick("has_adverse_events", "hasAdverseEvents")),
        )


@dataclass(frozen=True)
class Document:
    """A plain-text source document supplied to the engine.

    Attributes:
        source_id: Opaque, stable identifier (an NCT ID for trial records).
        text: Raw extracted content.
        metadata: Typed metadata shared by every chunk of the document.
    """

    source_id: str
    text: str
    metadata: DocumentMetadata = field(default_factory=DocumentMetadata)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dictionary with camelCase field names."""
        return {
            "sourceId": self.source_id,
            "text": self.text,
            "metadata": self.metadata.to_dict(),
        }


@dataclass(frozen=True)
class Chunk:
    """A contiguous window of a source document.

    ``text`` is always ``document.text[start_offset:end_offset]``. ``score``
    stays ``None`` until the chunk has been scored.

    Attributes:
        id: Deterministic identifier derived from source ID and ordinal.
        source_id: Back-reference to the parent document.
        text: The window's text.
        start_offset: Inclusive character offset into the parent text.
        end_offset: Exclusive character offset into the parent text.
        metadata: The parent document's metadata (same object).
        score: Relevance score, or None when unscored.
    """

    id: str
    source_id: str
    text: str
    start_offset: int
    end_offset: int
    metadata: DocumentMetadata
    score: float | None = None

    def with_score(self, score: float) -> "Chunk":
        """Return a copy of this chunk carrying ``score``."""
        return replace(self, score=score)

    def to_dict(self, max_text_length: int | None = None, marker: str = "") -> dict[str, Any]:
        """Serialize to the stable output record.

        Args:
            max_text_length: Cap for ``text``; longer text is cut and
                followed by ``marker``.
            marker: Truncation marker appended to capped text.

        Returns:
            Dictionary with camelCase field names.
        """
        text = self.text
        if max_text_length is not None and len(text) > max_text_length:
            text = text[:max_text_length] + marker
        return {
            "id": self.id,
            "sourceId": self.source_id,
            "text": text,
            "startOffset": self.start_offset,
            "endOffset": self.end_offset,
            "metadata": self.metadata.to_dict(),
            "score": self.score,
        }


@dataclass
class Citation:
    """Provenance of selected content back to one source document.

    Attributes:
        source_id: The cited document.
        ranges: ``(start_offset, end_offset)`` of every selected chunk
            drawn from that document, in selection order.
    """

    source_id: str
    ranges: list[tuple[int, int]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dictionary."""
        return {
            "sourceId": self.source_id,
            "ranges": [[start, end] for start, end in self.ranges],
        }
