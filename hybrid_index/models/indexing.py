"""
Indexing and worker result models.

Dependencies: pydantic
System role: Return types for IndexingService and EmbeddingWorker
"""

import uuid

from pydantic import BaseModel, Field

from hybrid_index.models.entity import EntityType


class IndexingResult(BaseModel):
    """Outcome of rebuilding one document's chunk and job set."""

    entity_type: EntityType
    entity_id: uuid.UUID
    chunk_count: int = Field(default=0, description="Chunks (and jobs) created")
    removed_chunks: int = Field(default=0, description="Chunks deleted before rebuilding")
    removed_jobs: int = Field(default=0, description="Non-terminal jobs deleted before rebuilding")
    skipped: bool = Field(
        default=False,
        description="True when the text was below the minimum size and nothing was created",
    )


class SweepReport(BaseModel):
    """Summary of one stale-note sweep."""

    processed: int = 0
    failed: int = 0
    duration_ms: float = 0.0


class WorkerReport(BaseModel):
    """Summary of one embedding worker pass."""

    claimed: int = 0
    completed: int = 0
    retried: int = 0
    failed: int = 0
    stale: int = 0
    errors: int = Field(default=0, description="Jobs left PROCESSING after a store error")


class ClaimedJob(BaseModel):
    """Snapshot of a job a worker has claimed (PENDING -> PROCESSING)."""

    id: uuid.UUID
    chunk_id: uuid.UUID
    entity_type: EntityType
    entity_id: uuid.UUID
    chunk_index: int
    content: str
    attempts: int = 0
