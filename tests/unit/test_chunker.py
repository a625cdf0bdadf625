"""Unit tests for character-window chunking."""

import math

import pytest

from ctgov_rag.core.domain import DocumentMetadata
from ctgov_rag.core.domain.exceptions import ConfigurationError, InvalidConfigurationError
from ctgov_rag.core.services.chunker import chunk, chunk_documents, window_offsets

pytestmark = pytest.mark.unit


def rejoin(chunks, overlap):
    """Re-join chunk texts, dropping the leading overlap of all but the first."""
    if not chunks:
        return ""
    return chunks[0].text + "".join(c.text[overlap:] for c in chunks[1:])


def expected_count(length, chunk_size, overlap):
    if length == 0:
        return 0
    if length <= chunk_size:
        return 1
    return math.ceil((length - overlap) / (chunk_size - overlap))


class TestChunkBoundaries:
    """Tests for window offsets and texts."""

    def test_regression_boundaries(self):
        """The 19-character example splits into three fixed windows."""
        text = "AAAA BBBB CCCC DDDD"
        chunks = chunk(text, 9, 3, "s1", DocumentMetadata())

        assert [(c.start_offset, c.end_offset) for c in chunks] == [(0, 9), (6, 15), (12, 19)]
        assert [c.text for c in chunks] == [text[0:9], text[6:15], text[12:19]]
        assert [c.text for c in chunks] == ["AAAA BBBB", "BBB CCCC ", "CC DDDD"]

    def test_ids_are_derived_from_source_and_index(self):
        """Chunk ids are deterministic."""
        chunks = chunk("AAAA BBBB CCCC DDDD", 9, 3, "NCT1", DocumentMetadata())
        assert [c.id for c in chunks] == ["NCT1#0", "NCT1#1", "NCT1#2"]
        assert all(c.source_id == "NCT1" for c in chunks)

    def test_metadata_is_shared_by_reference(self):
        """Every chunk points at the parent's metadata object."""
        metadata = DocumentMetadata(title="T", has_results=True)
        chunks = chunk("x" * 50, 10, 2, "s", metadata)
        assert all(c.metadata is metadata for c in chunks)

    def test_chunks_are_unscored(self):
        """Score is absent until the scorer runs."""
        chunks = chunk("some text here", 5, 1, "s", DocumentMetadata())
        assert all(c.score is None for c in chunks)

    def test_short_text_returns_single_chunk(self):
        """Texts no longer than chunk_size are not split."""
        chunks = chunk("Short text", 50, 10, "s", DocumentMetadata())
        assert len(chunks) == 1
        assert (chunks[0].start_offset, chunks[0].end_offset) == (0, 10)

    def test_empty_text_returns_empty_list(self):
        """Empty input yields no chunks."""
        assert chunk("", 100, 10, "s1", DocumentMetadata()) == []

    def test_final_window_is_clamped(self):
        """The last window ends at the text length and is never empty."""
        offsets = window_offsets(23, 10, 4)
        assert offsets[-1][1] == 23
        assert all(end > start for start, end in offsets)

    def test_zero_overlap_tiles_text(self):
        """Without overlap windows are contiguous."""
        assert window_offsets(10, 4, 0) == [(0, 4), (4, 8), (8, 10)]


class TestChunkInvariants:
    """Round-trip and count invariants over many shapes."""

    @pytest.mark.parametrize(
        "length,chunk_size,overlap",
        [(1, 5, 0), (7, 2, 1), (31, 7, 3), (100, 10, 9), (257, 64, 16)],
    )
    def test_round_trip_and_count(self, length, chunk_size, overlap):
        """Re-joined chunks reproduce the text and the count matches the formula."""
        text = "".join(chr(ord("a") + i % 26) for i in range(length))
        chunks = chunk(text, chunk_size, overlap, "doc", DocumentMetadata())

        assert rejoin(chunks, overlap) == text
        assert len(chunks) == expected_count(length, chunk_size, overlap)
        assert all(c.text == text[c.start_offset : c.end_offset] for c in chunks)

    def test_unicode_text_round_trips(self):
        """Offsets are character based, not byte based."""
        text = "不良事件 were reported: héadache, nausée, 出血。" * 3
        chunks = chunk(text, 12, 5, "doc", DocumentMetadata())
        assert rejoin(chunks, 5) == text


class TestChunkValidation:
    """Invalid window parameters are configuration errors."""

    def test_overlap_equal_or_exceeds_chunk_size_raises(self):
        with pytest.raises(InvalidConfigurationError):
            chunk("content", 100, 100, "s", DocumentMetadata())

        with pytest.raises(InvalidConfigurationError):
            chunk("content", 50, 75, "s", DocumentMetadata())

    def test_non_positive_chunk_size_raises(self):
        with pytest.raises(InvalidConfigurationError):
            chunk("content", 0, 0, "s", DocumentMetadata())

        with pytest.raises(InvalidConfigurationError):
            chunk("content", -10, 1, "s", DocumentMetadata())

    def test_negative_overlap_raises(self):
        with pytest.raises(InvalidConfigurationError):
            chunk("content", 10, -1, "s", DocumentMetadata())

    def test_invalid_window_raises_even_for_empty_text(self):
        """Configuration is checked before looking at the input."""
        with pytest.raises(ConfigurationError):
            chunk("", 0, 0, "s", DocumentMetadata())


class TestChunkDocuments:
    """Tests for chunking a batch of documents."""

    def test_preserves_document_arrival_order(self, sample_documents):
        chunks = chunk_documents(sample_documents, 40, 10)
        sources = [c.source_id for c in chunks]

        first_second = sources.index("NCT00000002")
        assert all(s == "NCT00000001" for s in sources[:first_second])
        assert all(s == "NCT00000002" for s in sources[first_second:])
