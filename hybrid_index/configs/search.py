"""
Hybrid search configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Search defaults and scoring constants
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from hybrid_index.configs.base import BaseSettings


class SearchSettings(BaseSettings):
    """Hybrid search defaults."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SEARCH_",
        case_sensitive=False,
        extra="ignore",
    )

    default_limit: int = Field(default=20, description="Results returned when no limit is given")
    keyword_weight: float = Field(default=0.4, description="Default keyword signal weight")
    vector_weight: float = Field(default=0.6, description="Default vector signal weight")
    weight_tolerance: float = Field(
        default=0.001,
        description="Allowed deviation of keyword_weight + vector_weight from 1.0",
    )
    tag_boost: float = Field(
        default=2.0,
        description="Keyword score multiplier when the query equals a tag name",
    )
    text_search_config: str = Field(
        default="english",
        description="PostgreSQL text search configuration",
    )
