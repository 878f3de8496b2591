"""
Cheap content-change gate used before re-indexing an edited document.

Positional similarity counts characters equal at equal offsets and divides
by the longer length. Insertions near the start shift every later offset
and read as a large change; that approximation is accepted.

Dependencies: None
System role: Decides whether an edit warrants a full re-index
"""

DEFAULT_SIMILARITY_THRESHOLD = 0.9


def positional_similarity(old_text: str, new_text: str) -> float:
    """
    Fraction of aligned positions holding the same character.

    Args:
        old_text: Previous canonical text
        new_text: New canonical text

    Returns:
        float: Value in [0.0, 1.0]; 1.0 when both are empty
    """
    max_length = max(len(old_text), len(new_text))
    if max_length == 0:
        return 1.0
    common = sum(1 for a, b in zip(old_text, new_text) if a == b)
    return common / max_length


def should_reindex(
    old_content: str | None,
    new_content: str | None,
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> bool:
    """
    Decide whether an edit is large enough to rebuild the chunk set.

    Args:
        old_content: Canonical text before the edit
        new_content: Canonical text after the edit
        threshold: Reindex when similarity is strictly below this value

    Returns:
        bool: True when the document should be re-indexed
    """
    old_text = (old_content or "").strip()
    new_text = (new_content or "").strip()

    if not old_text and not new_text:
        return False
    if not old_text or not new_text:
        return True
    if old_text == new_text:
        return False
    return positional_similarity(old_text, new_text) < threshold
