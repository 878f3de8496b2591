"""
Hybrid search models and schemas.

Request options, per-signal hits returned by the store and the merged
result shape returned to callers.

Dependencies: pydantic
System role: Hybrid search contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from hybrid_index.models.entity import EntityType


class SearchWeights(BaseModel):
    """Relative weight of each signal in the combined score (checked by validate_weights)."""

    keyword: float = 0.4
    vector: float = 0.6


class SearchOptions(BaseModel):
    """Options accepted by SearchService.search()."""

    limit: int = Field(default=20, ge=1, le=100, description="Maximum results returned")
    # Range and sum checked by validate_weights()
    keyword_weight: float = Field(default=0.4)
    vector_weight: float = Field(default=0.6)
    include_notes: bool = Field(default=True)
    include_thoughts: bool = Field(default=True)
    folder_id: uuid.UUID | None = Field(
        default=None,
        description="Restrict notes to one folder (thoughts have no folder)",
    )

    @property
    def weights(self) -> SearchWeights:
        """Weights as a standalone model."""
        return SearchWeights(keyword=self.keyword_weight, vector=self.vector_weight)

    def entity_types(self) -> list[EntityType]:
        """Entity types to search, in result concatenation order."""
        types = []
        if self.include_notes:
            types.append(EntityType.NOTE)
        if self.include_thoughts:
            types.append(EntityType.THOUGHT)
        return types


class EntityHit(BaseModel):
    """Display fields of a matched note or thought."""

    entity_type: EntityType
    entity_id: uuid.UUID
    title: str | None = None
    content: str = ""
    folder_id: uuid.UUID | None = None
    tags: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class KeywordHit(EntityHit):
    """Full-text match with its raw relevance rank."""

    rank: float = Field(description="Raw full-text relevance rank")
    tag_match: bool = Field(
        default=False,
        description="Query equals (case-insensitively) one of the entity's tag names",
    )


class VectorHit(EntityHit):
    """Best-matching chunk of an entity for the query vector."""

    similarity: float = Field(description="Cosine similarity of the chunk embedding")
    chunk_index: int | None = None
    chunk_content: str | None = None


class MatchedChunk(BaseModel):
    """Excerpt of the chunk that produced the vector match."""

    chunk_index: int
    content: str


class SearchResult(EntityHit):
    """One merged, scored search result."""

    keyword_score: float = 0.0
    vector_score: float = 0.0
    combined_score: float = 0.0
    matched_chunk: MatchedChunk | None = None


class SearchResponse(BaseModel):
    """Ranked results plus the parameters that produced them."""

    query: str
    results: list[SearchResult]
    count: int
    weights: SearchWeights
    has_vector_search: bool = Field(
        description="False when the provider was unavailable and only keywords were scored",
    )
