"""Lexical relevance scoring of chunks.

A chunk's score is the sum of

- one point per query token found in the chunk (exact token or
  case-insensitive substring),
- ``keyword_boost`` per boost keyword found in the chunk,
- ``metadata_boost`` when the parent document carries results or
  adverse-event data.
"""

import re
from collections.abc import Iterable

from ..domain import Chunk

TOKEN_RE = re.compile(r"[^\W_]+")
MIN_TOKEN_LENGTH = 2

DEFAULT_KEYWORD_BOOST = 2.0
DEFAULT_METADATA_BOOST = 1.0


def tokenize(text: str) -> list[str]:
    """Lowercase and split on non-alphanumeric boundaries.

    Tokens shorter than two characters are dropped. Order and duplicates
    are preserved.
    """
    return [token for token in TOKEN_RE.findall(text.lower()) if len(token) >= MIN_TOKEN_LENGTH]


def query_tokens(query: str) -> list[str]:
    """Tokenize a query, keeping the first occurrence of each token."""
    return list(dict.fromkeys(tokenize(query)))


def score_chunk(
    chunk: Chunk,
    tokens: Iterable[str],
    keyword_boosts: Iterable[str],
    *,
    keyword_boost: float = DEFAULT_KEYWORD_BOOST,
    metadata_boost: float = DEFAULT_METADATA_BOOST,
) -> Chunk:
    """Score one chunk.

    Args:
        chunk: Chunk to score.
        tokens: Query tokens (see ``query_tokens``).
        keyword_boosts: Domain keywords; each one present adds ``keyword_boost``.
        keyword_boost: Increment per keyword found.
        metadata_boost: Increment for safety-relevant parent documents.

    Returns:
        A copy of the chunk with ``score`` set. A chunk with no overlap
        scores 0.
    """
    text_lower = chunk.text.lower()
    chunk_tokens = set(tokenize(chunk.text))

    score = float(sum(1 for token in tokens if token in chunk_tokens or token in text_lower))

    for keyword in keyword_boosts:
        keyword_lower = keyword.lower()
        if keyword_lower and keyword_lower in text_lower:
            score += keyword_boost

    if chunk.metadata.safety_relevant:
        score += metadata_boost

    return chunk.with_score(score)


def score_chunks(
    chunks: Iterable[Chunk],
    query: str,
    keyword_boosts: Iterable[str],
    *,
    keyword_boost: float = DEFAULT_KEYWORD_BOOST,
    metadata_boost: float = DEFAULT_METADATA_BOOST,
) -> list[Chunk]:
    """Score every chunk against ``query``, preserving input order."""
    tokens = query_tokens(query)
    keywords = list(keyword_boosts)
    return [
        score_chunk(
            chunk,
            tokens,
            keywords,
            keyword_boost=keyword_boost,
            metadata_boost=metadata_boost,
        )
        for chunk in chunks
    ]
