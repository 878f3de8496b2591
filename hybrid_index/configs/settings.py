"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from hybrid_index.configs.base import BaseSettings
from hybrid_index.configs.celery_config import CelerySettings
from hybrid_index.configs.database import DatabaseSettings
from hybrid_index.configs.embedding import EmbeddingSettings
from hybrid_index.configs.indexing import IndexingSettings
from hybrid_index.configs.search import SearchSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    database: DatabaseSettings = DatabaseSettings()
    embedding: EmbeddingSettings = EmbeddingSettings()
    indexing: IndexingSettings = IndexingSettings()
    search: SearchSettings = SearchSettings()
    celery: CelerySettings = CelerySettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for the process lifetime.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from hybrid_index.configs import get_settings
        settings = get_settings()
    """
    return Settings()
