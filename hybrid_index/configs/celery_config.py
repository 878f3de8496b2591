"""
Celery configuration settings.

Manages Celery broker and result backend configuration for the embedding
worker and periodic maintenance tasks.

Dependencies: pydantic, pydantic_settings
System role: Async task queue configuration for embedding workers
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CelerySettings(BaseSettings):
    """Celery broker, result backend and beat schedule configuration."""

    model_config = SettingsConfigDict(
        env_prefix="CELERY_",
        case_sensitive=False,
        extra="ignore",
    )

    broker_url: str = Field(default="redis://localhost:6379/0", description="Broker URL")
    result_backend_url: str = Field(
        default="redis://localhost:6379/1",
        description="Result backend URL",
    )

    task_serializer: str = Field(default="json", description="Task serialization format")
    result_serializer: str = Field(default="json", description="Result serialization format")
    accept_content: list[str] = Field(
        default=["json"],
        description="Accepted content types",
    )
    timezone: str = Field(default="UTC", description="Celery timezone")

    # Beat schedule (seconds)
    process_jobs_interval: float = Field(
        default=10.0,
        description="How often the embedding worker drains PENDING jobs",
    )
    purge_failed_interval: float = Field(
        default=3600.0,
        description="How often FAILED jobs past retention are purged",
    )
    requeue_stuck_interval: float = Field(
        default=300.0,
        description="How often jobs stuck in PROCESSING are returned to PENDING",
    )
    stale_sweep_interval: float = Field(
        default=300.0,
        description="How often edited notes are swept for reindexing",
    )
