"""Length-bounded extractive summaries built from selected chunks."""

from ..domain import Chunk
from ..domain.exceptions import InvalidConfigurationError

TRUNCATION_MARKER = "... [truncated]"
NO_MATCH_MESSAGE = "No matching content found in the supplied documents."
SEGMENT_SEPARATOR = "\n\n"


def _segment(chunk: Chunk) -> str:
    return f"[Source: {chunk.source_id}] {chunk.text}"


def truncate(text: str, max_length: int, marker: str = TRUNCATION_MARKER) -> str:
    """Cut ``text`` to ``max_length`` characters and append ``marker`` if it was longer."""
    if len(text) <= max_length:
        return text
    return text[:max_length].rstrip() + marker


def summarize(selected_chunks: list[Chunk], max_length: int) -> str:
    """Concatenate chunk texts, in selection order, within ``max_length``.

    Each segment is prefixed with ``[Source: <source_id>]`` and segments are
    separated by a blank line. The segment that would overflow is cut to
    fit and followed by ``TRUNCATION_MARKER``; later chunks are dropped.
    The result is never longer than ``max_length + len(TRUNCATION_MARKER)``.

    Args:
        selected_chunks: Chunks from the selector, best first.
        max_length: Character budget (positive).

    Returns:
        The summary, or ``NO_MATCH_MESSAGE`` when nothing was selected.

    Raises:
        InvalidConfigurationError: If ``max_length`` is not positive.
    """
    if max_length <= 0:
        raise InvalidConfigurationError(
            "summary max_length must be positive", context={"max_length": max_length}
        )

    if not selected_chunks:
        return truncate(NO_MATCH_MESSAGE, max_length)

    summary = ""
    for chunk in selected_chunks:
        piece = _segment(chunk) if not summary else SEGMENT_SEPARATOR + _segment(chunk)
        if len(summary) + len(piece) <= max_length:
            summary += piece
            continue

        room = max_length - len(summary)
        return (summary + piece[:room]).rstrip() + TRUNCATION_MARKER

    return summary
