"""
Merge keyword and vector hits into one ranked list.

Per entity type, hits are merged by entity id:
  - keyword hits seed the map (vector score 0)
  - vector hits raise the vector score to the maximum seen and attach the
    first matched chunk excerpt, never replacing one already attached
  - the combined score is recomputed from both signals after every change

Merged lists from each entity type are then concatenated, sorted by
combined score and truncated. Zero scores are kept.

Dependencies: hybrid_index.models.search, hybrid_index.core.search.scoring
System role: Deterministic two-signal ranking
"""

import uuid
from collections.abc import Iterable, Sequence

from hybrid_index.core.search.scoring import (
    DEFAULT_TAG_BOOST,
    apply_tag_boost,
    combine_scores,
)
from hybrid_index.models.search import (
    EntityHit,
    KeywordHit,
    MatchedChunk,
    SearchResult,
    SearchWeights,
    VectorHit,
)

_ENTITY_FIELDS = set(EntityHit.model_fields)


def _result_from_hit(hit: EntityHit) -> SearchResult:
    return SearchResult(**hit.model_dump(include=_ENTITY_FIELDS))


def _matched_chunk(hit: VectorHit) -> MatchedChunk | None:
    if hit.chunk_content is None or hit.chunk_index is None:
        return None
    return MatchedChunk(chunk_index=hit.chunk_index, content=hit.chunk_content)


def merge_entity_results(
    keyword_hits: Iterable[KeywordHit],
    vector_hits: Iterable[VectorHit],
    weights: SearchWeights,
    limit: int,
    tag_boost: float = DEFAULT_TAG_BOOST,
) -> list[SearchResult]:
    """
    Merge the two signals for a single entity type.

    Args:
        keyword_hits: Full-text hits, any order
        vector_hits: Vector hits, best similarity first
        weights: Validated signal weights
        limit: Maximum merged results kept for this entity type
        tag_boost: Multiplier applied to ranks with an exact tag match

    Returns:
        list[SearchResult]: Merged results, best combined score first
    """
    merged: dict[uuid.UUID, SearchResult] = {}

    for hit in keyword_hits:
        result = _result_from_hit(hit)
        result.keyword_score = apply_tag_boost(hit.rank, hit.tag_match, tag_boost)
        result.vector_score = 0.0
        result.combined_score = combine_scores(result.keyword_score, 0.0, weights)
        merged[hit.entity_id] = result

    for hit in vector_hits:
        result = merged.get(hit.entity_id)
        if result is None:
            result = _result_from_hit(hit)
            result.keyword_score = 0.0
            result.vector_score = hit.similarity
            merged[hit.entity_id] = result
        else:
            result.vector_score = max(result.vector_score, hit.similarity)

        if result.matched_chunk is None:
            result.matched_chunk = _matched_chunk(hit)
        result.combined_score = combine_scores(
            result.keyword_score, result.vector_score, weights
        )

    return rank_results([list(merged.values())], limit)


def rank_results(groups: Sequence[Sequence[SearchResult]], limit: int) -> list[SearchResult]:
    """
    Concatenate result groups, sort by combined score and truncate.

    The sort is stable, so ties keep group order and then insertion order.

    Args:
        groups: Result lists, e.g. one per entity type
        limit: Maximum results returned

    Returns:
        list[SearchResult]: At most ``limit`` results, best first
    """
    combined = [result for group in groups for result in group]
    combined.sort(key=lambda result: result.combined_score, reverse=True)
    return combined[:limit]
