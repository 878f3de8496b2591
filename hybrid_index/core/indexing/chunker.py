"""
Boundary-aware sliding-window text chunker.

Splits canonical text into overlapping segments of at most ``chunk_size``
characters. Each window's right edge is pulled back to the last sentence
terminator in its trailing ``sentence_window`` characters, otherwise to the
last preceding space, so segments do not cut through words.

Dependencies: langchain_text_splitters, hybrid_index.core.exceptions
System role: Second stage of the indexing pipeline
"""

import re

from langchain_text_splitters import TextSplitter

from hybrid_index.core.exceptions import ValidationError

DEFAULT_CHUNK_SIZE = 2000
DEFAULT_CHUNK_OVERLAP = 200
DEFAULT_MIN_CHUNK_SIZE = 100
DEFAULT_SENTENCE_WINDOW = 100

_SENTENCE_END_RE = re.compile(r"[.!?]\s")


class TextChunker(TextSplitter):
    """
    Split text into overlapping, size-bounded chunks.

    Implements the LangChain TextSplitter interface, so split_documents()
    and create_documents() work on LangChain Documents as well.
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
        min_chunk_size: int = DEFAULT_MIN_CHUNK_SIZE,
        sentence_window: int = DEFAULT_SENTENCE_WINDOW,
    ) -> None:
        """
        Initialize chunker configuration.

        Args:
            chunk_size: Maximum chunk size in characters
            chunk_overlap: Characters shared between consecutive windows
            min_chunk_size: Trimmed slices shorter than this are dropped
            sentence_window: Trailing characters searched for a sentence end

        Raises:
            ValidationError: When sizes are inconsistent
        """
        if chunk_size <= 0:
            raise ValidationError("chunk_size must be positive", field="chunk_size")
        if chunk_overlap < 0 or chunk_overlap >= chunk_size:
            raise ValidationError(
                "chunk_overlap must be >= 0 and smaller than chunk_size",
                field="chunk_overlap",
            )
        super().__init__(chunk_size=chunk_size, chunk_overlap=chunk_overlap)
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.min_chunk_size = min_chunk_size
        self.sentence_window = sentence_window

    def split_text(self, text: str) -> list[str]:
        """
        Split text into chunks.

        Args:
            text: Canonical plain text

        Returns:
            list[str]: Chunks in document order; position in the list is the
            chunk index, so indexes are contiguous from 0
        """
        if not text or not text.strip():
            return []

        trimmed = text.strip()
        if len(trimmed) <= self.chunk_size:
            return [trimmed]

        chunks: list[str] = []
        length = len(trimmed)
        start = 0

        while start < length:
            end = start + self.chunk_size
            if end < length:
                end = self._find_break(trimmed, start, end)

            piece = trimmed[start:end].strip()
            if len(piece) >= self.min_chunk_size:
                chunks.append(piece)

            if end >= length:
                break

            next_start = end - self.chunk_overlap
            # A break found close to the window start must still move forward
            start = next_start if next_start > start else end

        return chunks

    def chunk(self, text: str | None) -> list[str]:
        """Split text, treating None as empty."""
        return self.split_text(text or "")

    def _find_break(self, text: str, start: int, end: int) -> int:
        """Pull ``end`` back to a sentence or word boundary after ``start``."""
        window_start = max(end - self.sentence_window, start)
        last_sentence = None
        for match in _SENTENCE_END_RE.finditer(text, window_start, end):
            last_sentence = match
        if last_sentence is not None and last_sentence.start() > start:
            # Keep the terminator and the whitespace after it
            return last_sentence.start() + 2

        last_space = text.rfind(" ", start + 1, end + 1)
        if last_space > start:
            return last_space
        return end


def chunk_text(
    text: str | None,
    size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
    min_size: int = DEFAULT_MIN_CHUNK_SIZE,
) -> list[str]:
    """
    Split text into overlapping chunks with default boundary rules.

    Args:
        text: Canonical plain text
        size: Maximum chunk size in characters
        overlap: Overlap between consecutive windows
        min_size: Minimum size of a kept chunk

    Returns:
        list[str]: Chunks in document order
    """
    return TextChunker(size, overlap, min_size).chunk(text)
