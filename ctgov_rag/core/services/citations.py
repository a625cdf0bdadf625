"""Provenance records for selected chunks."""

from ..domain import Chunk, Citation


def extract_citations(selected_chunks: list[Chunk]) -> list[Citation]:
    """Group selected chunks by source document.

    One citation per distinct ``source_id``, ordered by first appearance in
    ``selected_chunks`` (so by each source's best-scoring chunk). Every
    chunk's offsets are kept, in selection order.
    """
    citations: dict[str, Citation] = {}
    for chunk in selected_chunks:
        citation = citations.setdefault(chunk.source_id, Citation(source_id=chunk.source_id))
        citation.ranges.append((chunk.start_offset, chunk.end_offset))
    return list(citations.values())
