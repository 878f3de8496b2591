"""
Indexed entity types.

Dependencies: enum (stdlib)
System role: Discriminator shared by chunks, jobs and search results
"""

import enum


class EntityType(str, enum.Enum):
    """
    Kinds of source documents that get chunked and searched.

    NOTE: Titled note with optional rich editor state and tags
    THOUGHT: Short captured thought with suggested tags
    """

    NOTE = "note"
    THOUGHT = "thought"
