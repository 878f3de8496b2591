"""
Embedding provider configuration settings.

Model, output dimensionality and call timeout for the embedding provider.
The dimensionality also sizes the chunk embedding column.

Dependencies: pydantic, pydantic_settings
System role: Embedding provider configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from hybrid_index.configs.base import BaseSettings


class EmbeddingSettings(BaseSettings):
    """Embedding provider configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EMBEDDING_",
        case_sensitive=False,
        extra="ignore",
    )

    model: str = Field(
        default="models/gemini-embedding-001",
        description="Embedding model ID",
    )
    dimensions: int = Field(
        default=512,
        description="Embedding vector dimension (must match the chunks.embedding column)",
    )
    timeout_seconds: float = Field(
        default=5.0,
        description="Per-call timeout before the provider is treated as unavailable",
    )
    api_key: str | None = Field(
        default=None,
        description="Provider API key (falls back to the provider's own env var)",
    )
