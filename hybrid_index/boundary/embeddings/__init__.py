"""
Embedding provider boundary.

Exports:
  - EmbeddingProvider: Time-bounded embed() raising ProviderError
  - FixedDimensionEmbeddings: Google embeddings with fixed output size
"""

from hybrid_index.boundary.embeddings.embeddings_wrapper import FixedDimensionEmbeddings
from hybrid_index.boundary.embeddings.provider import EmbeddingProvider

__all__ = ["EmbeddingProvider", "FixedDimensionEmbeddings"]
