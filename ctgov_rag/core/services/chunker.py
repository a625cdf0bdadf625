"""Fixed-size, overlapping character windows over document text.

Windows are character-offset based and may split words. For a text of
length ``L`` the number of windows is ``1`` when ``L <= chunk_size`` and
``ceil((L - overlap) / (chunk_size - overlap))`` otherwise; empty text
yields no windows.
"""

import logging

from ..domain import Chunk, Document, DocumentMetadata
from ..domain.exceptions import InvalidConfigurationError

logger = logging.getLogger(__name__)


def validate_window(chunk_size: int, overlap: int) -> None:
    """Check window parameters.

    Raises:
        InvalidConfigurationError: If ``chunk_size <= 0`` or overlap is not
            in ``[0, chunk_size)``.
    """
    if chunk_size <= 0:
        raise InvalidConfigurationError(
            "chunk_size must be positive", context={"chunk_size": chunk_size}
        )
    if overlap < 0:
        raise InvalidConfigurationError(
            "overlap must be non-negative", context={"overlap": overlap}
        )
    if overlap >= chunk_size:
        raise InvalidConfigurationError(
            "overlap must be less than chunk_size",
            context={"chunk_size": chunk_size, "overlap": overlap},
        )


def window_offsets(length: int, chunk_size: int, overlap: int) -> list[tuple[int, int]]:
    """Compute ``(start, end)`` offsets of every window over ``length`` characters.

    Args:
        length: Text length.
        chunk_size: Window width.
        overlap: Characters shared by consecutive windows.

    Returns:
        Offsets in order; the last window is clamped to ``length``.
    """
    validate_window(chunk_size, overlap)

    stride = chunk_size - overlap
    offsets: list[tuple[int, int]] = []
    start = 0
    while start < length:
        end = min(start + chunk_size, length)
        offsets.append((start, end))
        if end == length:
            break
        start += stride
    return offsets


def chunk(
    text: str,
    chunk_size: int,
    overlap: int,
    source_id: str,
    metadata: DocumentMetadata,
) -> list[Chunk]:
    """Split one document's text into overlapping windows.

    Args:
        text: Document text.
        chunk_size: Window width in characters (must be positive).
        overlap: Overlap between consecutive windows (``0 <= overlap < chunk_size``).
        source_id: Identifier of the parent document.
        metadata: Parent metadata, shared by reference with every chunk.

    Returns:
        Chunks in offset order with ids ``"{source_id}#{index}"``.

    Raises:
        InvalidConfigurationError: If the window parameters are invalid.
    """
    return [
        Chunk(
            id=f"{source_id}#{index}",
            source_id=source_id,
            text=text[start:end],
            start_offset=start,
            end_offset=end,
            metadata=metadata,
        )
        for index, (start, end) in enumerate(window_offsets(len(text), chunk_size, overlap))
    ]


def chunk_documents(documents: list[Document], chunk_size: int, overlap: int) -> list[Chunk]:
    """Chunk documents in arrival order, concatenating their windows."""
    chunks: list[Chunk] = []
    for document in documents:
        document_chunks = chunk(
            document.text, chunk_size, overlap, document.source_id, document.metadata
        )
        if not document_chunks:
            logger.debug(f"Document {document.source_id} has no text, skipped")
        chunks.extend(document_chunks)
    return chunks
