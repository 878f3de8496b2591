"""
Text preparation for indexing.

Exports:
  - normalize, extract_text_content, strip_markup, prepare_content
  - TextChunker, chunk_text
  - positional_similarity, should_reindex
"""

from hybrid_index.core.indexing.change_detection import positional_similarity, should_reindex
from hybrid_index.core.indexing.chunker import TextChunker, chunk_text
from hybrid_index.core.indexing.normalizer import (
    extract_text_content,
    normalize,
    prepare_content,
    strip_markup,
)

__all__ = [
    "TextChunker",
    "chunk_text",
    "extract_text_content",
    "normalize",
    "positional_similarity",
    "prepare_content",
    "should_reindex",
    "strip_markup",
]
