"""
Scoring primitives for hybrid search.

Scores are combined as a plain weighted sum of the raw keyword rank and the
cosine similarity. Neither signal is normalized first, so a strong keyword
rank can outweigh any vector similarity.

Dependencies: hybrid_index.core.exceptions
System role: Weight validation and score arithmetic
"""

from hybrid_index.core.exceptions import ValidationError
from hybrid_index.models.search import SearchWeights

DEFAULT_WEIGHT_TOLERANCE = 0.001
DEFAULT_TAG_BOOST = 2.0


def validate_weights(
    weights: SearchWeights,
    tolerance: float = DEFAULT_WEIGHT_TOLERANCE,
) -> None:
    """
    Check that both weights lie in [0, 1] and sum to 1.0.

    Args:
        weights: Candidate weights
        tolerance: Allowed absolute deviation from 1.0

    Raises:
        ValidationError: When a weight is out of range or the sum is outside the tolerance
    """
    for name, value in (("keyword", weights.keyword), ("vector", weights.vector)):
        if not 0.0 <= value <= 1.0:
            raise ValidationError(
                f"{name}_weight must be between 0 and 1",
                field=f"{name}_weight",
                details={"value": value},
            )

    total = weights.keyword + weights.vector
    if abs(total - 1.0) > tolerance:
        raise ValidationError(
            "keyword_weight and vector_weight must sum to 1.0",
            field="weights",
            details={"keyword": weights.keyword, "vector": weights.vector, "sum": total},
        )


def apply_tag_boost(rank: float, tag_match: bool, boost: float = DEFAULT_TAG_BOOST) -> float:
    """Multiply a keyword rank when the query named one of the entity's tags."""
    return rank * boost if tag_match else rank


def combine_scores(keyword_score: float, vector_score: float, weights: SearchWeights) -> float:
    """Weighted sum of both signals; callers pass 0.0 for a missing signal."""
    return keyword_score * weights.keyword + vector_score * weights.vector
