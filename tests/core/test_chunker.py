"""
Test suite for TextChunker and chunk_text.

Tests size bounds, overlap, boundary detection, minimum chunk size and
parameter validation.

System role: Verification of the chunking stage of the indexing pipeline
"""

import pytest
from langchain_core.documents import Document

from hybrid_index.core.exceptions import ValidationError
from hybrid_index.core.indexing.chunker import TextChunker, chunk_text


class TestChunkTextSmallInputs:
    """Test suite for chunk_text() on empty and short input."""

    @pytest.mark.parametrize("text", ["", "   \n\t  ", None])
    def test_chunk_text_should_return_empty_list_for_blank_input(self, text) -> None:
        """Test empty or whitespace-only text yields no chunks."""
        # Act
        chunks = chunk_text(text)

        # Assert
        assert chunks == []

    def test_chunk_text_should_return_single_trimmed_chunk_when_within_size(self) -> None:
        """Test text up to chunk size is one trimmed chunk."""
        # Arrange
        text = "  " + "a" * 2000 + "  "

        # Act
        chunks = chunk_text(text)

        # Assert
        assert chunks == ["a" * 2000]

    def test_chunk_text_should_keep_short_text_below_min_size(self) -> None:
        """Test a document shorter than min_size still chunks to itself."""
        # Act
        chunks = chunk_text("short note")

        # Assert
        assert chunks == ["short note"]


class TestChunkTextSlidingWindow:
    """Test suite for chunk_text() on multi-window input."""

    def test_chunk_text_should_split_long_text_into_bounded_chunks(self, long_text: str) -> None:
        """Test every chunk respects the maximum size."""
        # Act
        chunks = chunk_text(long_text)

        # Assert
        assert len(chunks) > 1
        assert all(len(chunk) <= 2000 for chunk in chunks)

    def test_chunk_text_should_overlap_consecutive_chunks(self, long_text: str) -> None:
        """Test the start of each chunk repeats text from the previous one."""
        # Act
        chunks = chunk_text(long_text)

        # Assert
        for previous, current in zip(chunks, chunks[1:]):
            assert current[:50] in previous

    def test_chunk_text_should_break_after_sentence_terminator(self, long_text: str) -> None:
        """Test windows end on a sentence boundary when one is near the edge."""
        # Act
        chunks = chunk_text(long_text)

        # Assert
        assert all(chunk.endswith(".") for chunk in chunks[:-1])

    def test_chunk_text_should_break_on_space_without_sentence_end(self) -> None:
        """Test windows fall back to the last space so words stay whole."""
        # Arrange
        words = ["word%03d" % i for i in range(600)]
        text = " ".join(words)

        # Act
        chunks = chunk_text(text)

        # Assert
        assert len(chunks) > 1
        for chunk in chunks[:-1]:
            assert chunk.split(" ")[-1] in words

    def test_chunk_text_should_hard_cut_text_without_spaces(self) -> None:
        """Test an unbroken run is cut at the window edge."""
        # Arrange
        text = "a" * 2001

        # Act
        chunks = chunk_text(text)

        # Assert
        assert chunks == ["a" * 2000, "a" * 201]

    def test_chunk_text_should_drop_trailing_slice_shorter_than_min_size(self) -> None:
        """Test a final slice below min_size is discarded."""
        # Arrange
        text = "a" * 2000 + " " + "b" * 50

        # Act
        chunks = chunk_text(text, size=2000, overlap=0, min_size=100)

        # Assert
        assert chunks == ["a" * 2000]

    def test_chunk_text_should_cover_the_end_of_the_text(self, long_text: str) -> None:
        """Test the last chunk ends where the text ends."""
        # Act
        chunks = chunk_text(long_text)

        # Assert
        assert long_text.endswith(chunks[-1])

    def test_chunk_text_should_be_deterministic(self, long_text: str) -> None:
        """Test identical input gives identical chunks."""
        # Act & Assert
        assert chunk_text(long_text) == chunk_text(long_text)


class TestTextChunkerValidation:
    """Test suite for TextChunker parameter validation."""

    @pytest.mark.parametrize(
        "size,overlap",
        [(0, 0), (-5, 0), (100, 100), (100, 150), (100, -1)],
    )
    def test_init_should_reject_inconsistent_sizes(self, size: int, overlap: int) -> None:
        """Test invalid size/overlap combinations raise ValidationError."""
        # Act & Assert
        with pytest.raises(ValidationError):
            TextChunker(chunk_size=size, chunk_overlap=overlap)

    def test_chunk_should_always_advance_with_large_overlap(self) -> None:
        """Test a break close to the window start cannot stall the window."""
        # Arrange
        chunker = TextChunker(chunk_size=50, chunk_overlap=45, min_chunk_size=1)
        text = "ab " + "c" * 200

        # Act
        chunks = chunker.chunk(text)

        # Assert
        assert chunks
        assert text.endswith(chunks[-1])


class TestTextChunkerDocuments:
    """Test suite for the LangChain TextSplitter interface."""

    def test_split_documents_should_keep_metadata_on_every_chunk(self, long_text: str) -> None:
        """Test Document splitting uses the same boundaries and copies metadata."""
        # Arrange
        chunker = TextChunker()
        document = Document(page_content=long_text, metadata={"entity_id": "note-1"})

        # Act
        pieces = chunker.split_documents([document])

        # Assert
        assert [piece.page_content for piece in pieces] == chunker.chunk(long_text)
        assert all(piece.metadata["entity_id"] == "note-1" for piece in pieces)
