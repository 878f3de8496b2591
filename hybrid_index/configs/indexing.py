"""
Indexing pipeline configuration settings.

Chunking bounds, change-detection threshold and embedding job queue
retry/retention policy.

Dependencies: pydantic, pydantic_settings
System role: Indexing and job queue configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from hybrid_index.configs.base import BaseSettings


class IndexingSettings(BaseSettings):
    """Chunking, change detection and job queue settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="INDEXING_",
        case_sensitive=False,
        extra="ignore",
    )

    # Chunking settings
    chunk_size: int = Field(default=2000, description="Maximum chunk size in characters")
    chunk_overlap: int = Field(default=200, description="Overlap between consecutive chunks")
    min_chunk_size: int = Field(
        default=100,
        description="Chunks (and whole documents) shorter than this are not indexed",
    )
    sentence_window: int = Field(
        default=100,
        description="Trailing window searched for a sentence terminator",
    )

    # Change detection
    similarity_threshold: float = Field(
        default=0.9,
        description="Reindex when positional similarity falls below this value",
    )

    # Job queue
    max_attempts: int = Field(default=3, description="Attempts before a job is dead-lettered")
    failed_retention_hours: int = Field(
        default=24,
        description="FAILED jobs older than this are purged",
    )
    worker_batch_size: int = Field(default=10, description="Jobs claimed per worker pass")
    processing_timeout_seconds: int = Field(
        default=600,
        description="PROCESSING jobs claimed longer ago than this are returned to PENDING",
    )

    # Stale document sweep
    stale_cooldown_seconds: int = Field(
        default=120,
        description="Quiet period after an edit before the sweep reindexes a note",
    )
    sweep_batch_size: int = Field(default=50, description="Notes reindexed per sweep")
