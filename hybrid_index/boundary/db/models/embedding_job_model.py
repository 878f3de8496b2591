"""
Embedding job ORM model.

Durable work queue rows: one job per chunk, claimed by workers with
compare-and-swap status updates.

Dependencies: sqlalchemy, hybrid_index.boundary.db.base
System role: Persistent embedding job queue
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from hybrid_index.boundary.db.base import Base, TimestampMixin, UUIDMixin
from hybrid_index.models.entity import EntityType


class EmbeddingJobStatus(str, enum.Enum):
    """
    Embedding job states.

    PENDING: Waiting for a worker (new, or retrying after a failure)
    PROCESSING: Claimed by a worker; last_attempt_at records the claim
    COMPLETED: Embedding written to the chunk (terminal)
    FAILED: Retries exhausted; dead-lettered until purged (terminal)
    """

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @classmethod
    def active(cls) -> tuple["EmbeddingJobStatus", ...]:
        """Non-terminal states."""
        return (cls.PENDING, cls.PROCESSING)


class EmbeddingJobModel(Base, UUIDMixin, TimestampMixin):
    """
    Embedding job ORM model.

    The job keeps its own copy of the chunk text so a worker never reads the
    live chunk, and there is deliberately no foreign key to chunks: a
    re-index may delete the chunk while a worker still holds the job.

    Attributes:
        id: UUID primary key (auto-generated)
        tenant_id: Tenant scope
        user_id: Owner that triggered indexing
        entity_type: NOTE or THOUGHT
        entity_id: Source document id
        chunk_id: Target chunk for the embedding
        chunk_index: Target chunk position
        content: Snapshot of the chunk text
        status: Queue state (PENDING/PROCESSING/COMPLETED/FAILED)
        attempts: Failed attempts so far
        last_attempt_at: Time of the latest claim
        error: Last failure message

    Workflow:
        1. Orchestrator creates the job with status=PENDING, attempts=0
        2. Worker claims it: PENDING -> PROCESSING (0 rows updated = lost race)
        3. Success: chunk embedding + PROCESSING -> COMPLETED in one transaction
        4. Failure: attempts += 1; PENDING again, or FAILED at max attempts
    """

    __tablename__ = "embedding_jobs"

    tenant_id: Mapped[str] = mapped_column(String(255), nullable=False)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    entity_type: Mapped[EntityType] = mapped_column(
        Enum(EntityType, native_enum=False),
        nullable=False,
    )
    entity_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    chunk_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    chunk_index: Mapped[int] = mapped_column(Integer, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[EmbeddingJobStatus] = mapped_column(
        Enum(EmbeddingJobStatus, native_enum=False),
        nullable=False,
        default=EmbeddingJobStatus.PENDING,
    )
    attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_attempt_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )
    error: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)

    __table_args__ = (
        Index("ix_embedding_jobs_status_created_at", "status", "created_at"),
        Index("ix_embedding_jobs_entity", "entity_type", "entity_id"),
        Index("ix_embedding_jobs_chunk_id", "chunk_id"),
    )
