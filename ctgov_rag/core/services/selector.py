"""Stable top-K selection over scored chunks."""

from ..domain import Chunk


def select_top_k(scored_chunks: list[Chunk], k: int) -> list[Chunk]:
    """Return the ``k`` best chunks.

    Ordered by descending score; equal scores keep the order in which the
    chunker produced them (document arrival order, then offset).

    Args:
        scored_chunks: Chunks with ``score`` set, in production order.
        k: Positive number of chunks to keep (validated by the caller).

    Returns:
        ``min(k, len(scored_chunks))`` chunks.
    """
    ranked = sorted(
        enumerate(scored_chunks),
        key=lambda item: (-(item[1].score or 0.0), item[0]),
    )
    return [chunk for _, chunk in ranked[:k]]
