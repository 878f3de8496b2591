"""
Core business logic module.

Contains the exception hierarchy, text normalization and chunking, change
detection and the hybrid score merge. Nothing here touches the database.
"""

from hybrid_index.core.exceptions import (
    HybridIndexException,
    ProviderError,
    StaleWriteError,
    StoreError,
    ValidationError,
)

__all__ = [
    "HybridIndexException",
    "ProviderError",
    "StaleWriteError",
    "StoreError",
    "ValidationError",
]
