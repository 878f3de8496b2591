"""
Embedding job queue service.

Drives the job state machine PENDING -> PROCESSING -> {COMPLETED |
PENDING | FAILED}. Each call commits its own transaction, so jobs are
claimed, finalized and retried independently of their siblings.

Dependencies: hybrid_index.boundary.db, hybrid_index.configs
System role: Embedding job queue orchestration
"""

import enum
import logging
from datetime import timedelta
from typing import Any
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hybrid_index.boundary.db.base import utc_now
from hybrid_index.boundary.db.CRUD.chunk_crud import chunk_crud
from hybrid_index.boundary.db.CRUD.embedding_job_crud import embedding_job_crud
from hybrid_index.boundary.db.models.embedding_job_model import EmbeddingJobStatus
from hybrid_index.configs import get_settings
from hybrid_index.configs.indexing import IndexingSettings
from hybrid_index.core.exceptions import StaleWriteError, StoreError
from hybrid_index.models.indexing import ClaimedJob

logger = logging.getLogger(__name__)


class JobOutcome(str, enum.Enum):
    """
    Result of finalizing a claimed job.

    COMPLETED: Embedding stored, job terminal
    RETRY: Failure counted, job back to PENDING
    FAILED: Failure counted, retries exhausted
    STALE: Job or chunk was replaced by a concurrent re-index; nothing written
    """

    COMPLETED = "completed"
    RETRY = "retry"
    FAILED = "failed"
    STALE = "stale"


class EmbeddingJobService:
    """
    Embedding job queue service.

    Wraps EmbeddingJobCRUD transitions with transaction handling. Store
    failures roll back and raise StoreError; lost races and stale writes
    are reported as return values.
    """

    def __init__(self, db: AsyncSession, settings: IndexingSettings | None = None) -> None:
        """
        Initialize job service.

        Args:
            db: AsyncSession for job and chunk writes
            settings: Optional indexing settings (application settings if None)
        """
        self.db = db
        self.settings = settings or get_settings().indexing

    async def _rollback_and_raise(self, operation: str, error: SQLAlchemyError) -> None:
        await self.db.rollback()
        raise StoreError(f"Embedding job {operation} failed: {error}", operation=operation) from error

    async def claim(self, job_id: UUID) -> bool:
        """
        Claim a single job.

        Returns:
            True if this caller now owns the job, False if another worker
            won the race or the job is no longer PENDING
        """
        try:
            won = await embedding_job_crud.claim(self.db, job_id)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self._rollback_and_raise("claim", e)
        return won

    async def claim_next(self, batch_size: int | None = None) -> list[ClaimedJob]:
        """
        Claim up to ``batch_size`` of the oldest PENDING jobs.

        Jobs taken by a competing worker between the read and the claim are
        simply left out.

        Returns:
            list[ClaimedJob]: Jobs now PROCESSING for this caller
        """
        limit = batch_size or self.settings.worker_batch_size
        claimed: list[ClaimedJob] = []
        try:
            for job_id in await embedding_job_crud.get_pending_ids(self.db, limit):
                if not await embedding_job_crud.claim(self.db, job_id):
                    continue
                job = await embedding_job_crud.get_by_id(self.db, job_id)
                claimed.append(
                    ClaimedJob(
                        id=job.id,
                        chunk_id=job.chunk_id,
                        entity_type=job.entity_type,
                        entity_id=job.entity_id,
                        chunk_index=job.chunk_index,
                        content=job.content,
                        attempts=job.attempts,
                    )
                )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self._rollback_and_raise("claim_next", e)

        if claimed:
            logger.debug(f"{__name__}:claim_next - Claimed {len(claimed)} jobs")
        return claimed

    async def complete(self, job_id: UUID, chunk_id: UUID, vector: list[float]) -> JobOutcome:
        """
        Store the embedding and mark the job COMPLETED in one transaction.

        If a re-index removed the chunk or the job in the meantime, nothing
        is written and STALE is returned.

        Returns:
            JobOutcome.COMPLETED or JobOutcome.STALE
        """
        try:
            await chunk_crud.set_embedding(self.db, chunk_id, vector)
            if not await embedding_job_crud.mark_completed(self.db, job_id):
                raise StaleWriteError(
                    "Job is no longer processing",
                    job_id=str(job_id),
                    chunk_id=str(chunk_id),
                )
            await self.db.commit()
        except StaleWriteError as e:
            await self.db.rollback()
            logger.info(f"{__name__}:complete - Discarded stale embedding: {e}")
            return JobOutcome.STALE
        except SQLAlchemyError as e:
            await self._rollback_and_raise("complete", e)
        return JobOutcome.COMPLETED

    async def fail(self, job_id: UUID, error: str) -> JobOutcome:
        """
        Record a failed attempt.

        Returns:
            RETRY while attempts remain, FAILED once exhausted, STALE if the
            job is gone or was not PROCESSING
        """
        try:
            status = await embedding_job_crud.record_failure(
                self.db, job_id, error, self.settings.max_attempts
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self._rollback_and_raise("fail", e)

        if status is None:
            return JobOutcome.STALE
        if status == EmbeddingJobStatus.FAILED:
            logger.warning(
                f"{__name__}:fail - Job {job_id} dead-lettered after "
                f"{self.settings.max_attempts} attempts: {error}"
            )
            return JobOutcome.FAILED
        return JobOutcome.RETRY

    async def purge_failed(self, older_than: timedelta | None = None) -> int:
        """
        Delete FAILED jobs past the retention window.

        Args:
            older_than: Retention window (default: failed_retention_hours)

        Returns:
            Number of jobs deleted
        """
        retention = older_than or timedelta(hours=self.settings.failed_retention_hours)
        try:
            deleted = await embedding_job_crud.purge_failed(self.db, utc_now() - retention)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self._rollback_and_raise("purge_failed", e)

        if deleted:
            logger.info(f"{__name__}:purge_failed - Purged {deleted} failed jobs")
        return deleted

    async def requeue_stuck(self, older_than: timedelta | None = None) -> int:
        """
        Return jobs held PROCESSING for too long to PENDING.

        Args:
            older_than: Claim age limit (default: processing_timeout_seconds)

        Returns:
            Number of jobs requeued
        """
        timeout = older_than or timedelta(seconds=self.settings.processing_timeout_seconds)
        try:
            requeued = await embedding_job_crud.requeue_stuck(self.db, utc_now() - timeout)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self._rollback_and_raise("requeue_stuck", e)

        if requeued:
            logger.warning(f"{__name__}:requeue_stuck - Requeued {requeued} stuck jobs")
        return requeued

    async def get_job_status(self, job_id: UUID) -> dict[str, Any] | None:
        """
        Get job status for polling.

        Returns:
            dict with id, status, attempts, error and timestamps, or None
        """
        job = await embedding_job_crud.get_by_id(self.db, job_id)
        if job is None:
            return None
        return {
            "id": str(job.id),
            "status": job.status.value,
            "entity_type": job.entity_type.value,
            "entity_id": str(job.entity_id),
            "chunk_index": job.chunk_index,
            "attempts": job.attempts,
            "error": job.error,
            "last_attempt_at": job.last_attempt_at.isoformat() if job.last_attempt_at else None,
            "created_at": job.created_at.isoformat() if job.created_at else None,
            "updated_at": job.updated_at.isoformat() if job.updated_at else None,
        }

    async def queue_stats(self) -> dict[str, int]:
        """Number of jobs per status, keyed by status value."""
        counts = await embedding_job_crud.count_by_status(self.db)
        return {status.value: count for status, count in counts.items()}
