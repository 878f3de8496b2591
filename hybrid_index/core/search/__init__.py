"""
Hybrid score computation and merging.

Exports:
  - validate_weights, combine_scores, apply_tag_boost
  - merge_entity_results, rank_results
"""

from hybrid_index.core.search.hybrid_merge import merge_entity_results, rank_results
from hybrid_index.core.search.scoring import apply_tag_boost, combine_scores, validate_weights

__all__ = [
    "apply_tag_boost",
    "combine_scores",
    "merge_entity_results",
    "rank_results",
    "validate_weights",
]
