"""
Domain models and schemas.

Pydantic models shared between services, search and workers.
"""

from hybrid_index.models.entity import EntityType
from hybrid_index.models.indexing import ClaimedJob, IndexingResult, SweepReport, WorkerReport
from hybrid_index.models.search import (
    EntityHit,
    KeywordHit,
    MatchedChunk,
    SearchOptions,
    SearchResponse,
    SearchResult,
    SearchWeights,
    VectorHit,
)

__all__ = [
    "ClaimedJob",
    "EntityHit",
    "EntityType",
    "IndexingResult",
    "KeywordHit",
    "MatchedChunk",
    "SearchOptions",
    "SearchResponse",
    "SearchResult",
    "SearchWeights",
    "SweepReport",
    "VectorHit",
    "WorkerReport",
]
