"""
Embedding job CRUD operations.

Every state transition is a compare-and-swap UPDATE guarded by the
expected current status, so concurrent workers never double-process a
job: a transition that updates 0 rows lost the race.

Dependencies: sqlalchemy, hybrid_index.boundary.db.models
System role: Embedding job queue persistence
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hybrid_index.boundary.db.base import utc_now
from hybrid_index.boundary.db.CRUD.base_crud import BaseCRUD
from hybrid_index.boundary.db.models.chunk_model import ChunkModel
from hybrid_index.boundary.db.models.embedding_job_model import (
    EmbeddingJobModel,
    EmbeddingJobStatus,
)
from hybrid_index.models.entity import EntityType


class EmbeddingJobCRUD(BaseCRUD[EmbeddingJobModel]):
    """
    CRUD operations for EmbeddingJobModel.

    Extends BaseCRUD with queue transitions: claim, complete, record a
    failure, purge and requeue.
    """

    def __init__(self) -> None:
        """Initialize EmbeddingJobCRUD with EmbeddingJobModel."""
        super().__init__(EmbeddingJobModel)

    async def create_for_chunks(
        self,
        session: AsyncSession,
        chunks: Sequence[ChunkModel],
        user_id: str,
    ) -> list[EmbeddingJobModel]:
        """
        Create one PENDING job per chunk with a snapshot of its content.

        Args:
            session: Async database session
            chunks: Freshly inserted chunks (ids assigned)
            user_id: Owner that triggered indexing

        Returns:
            Created jobs
        """
        jobs = [
            EmbeddingJobModel(
                tenant_id=chunk.tenant_id,
                user_id=user_id,
                entity_type=chunk.entity_type,
                entity_id=chunk.entity_id,
                chunk_id=chunk.id,
                chunk_index=chunk.chunk_index,
                content=chunk.content,
                status=EmbeddingJobStatus.PENDING,
                attempts=0,
            )
            for chunk in chunks
        ]
        session.add_all(jobs)
        await session.flush()
        return jobs

    async def delete_active_for_entity(
        self,
        session: AsyncSession,
        entity_type: EntityType,
        entity_id: UUID,
    ) -> int:
        """
        Delete PENDING and PROCESSING jobs of a document.

        Returns:
            Number of jobs deleted
        """
        stmt = delete(EmbeddingJobModel).where(
            EmbeddingJobModel.entity_type == entity_type,
            EmbeddingJobModel.entity_id == entity_id,
            EmbeddingJobModel.status.in_(EmbeddingJobStatus.active()),
        )
        result = await session.execute(stmt)
        return result.rowcount

    async def get_pending_ids(self, session: AsyncSession, limit: int) -> list[UUID]:
        """
        Oldest PENDING job ids.

        Rows locked by another worker's transaction are skipped on
        PostgreSQL; the claim itself stays a compare-and-swap either way.
        """
        stmt = (
            select(EmbeddingJobModel.id)
            .where(EmbeddingJobModel.status == EmbeddingJobStatus.PENDING)
            .order_by(EmbeddingJobModel.created_at)
            .limit(limit)
            .with_for_update(skip_locked=True)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def claim(self, session: AsyncSession, id: UUID) -> bool:
        """
        Move a job PENDING -> PROCESSING and stamp last_attempt_at.

        Returns:
            True if this caller won the claim, False if the job is gone or
            no longer PENDING
        """
        stmt = (
            update(EmbeddingJobModel)
            .where(
                EmbeddingJobModel.id == id,
                EmbeddingJobModel.status == EmbeddingJobStatus.PENDING,
            )
            .values(status=EmbeddingJobStatus.PROCESSING, last_attempt_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount == 1

    async def mark_completed(self, session: AsyncSession, id: UUID) -> bool:
        """
        Move a job PROCESSING -> COMPLETED.

        Returns:
            False if the job was deleted or is no longer PROCESSING
        """
        stmt = (
            update(EmbeddingJobModel)
            .where(
                EmbeddingJobModel.id == id,
                EmbeddingJobModel.status == EmbeddingJobStatus.PROCESSING,
            )
            .values(status=EmbeddingJobStatus.COMPLETED, error=None)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount == 1

    async def record_failure(
        self,
        session: AsyncSession,
        id: UUID,
        error: str,
        max_attempts: int,
    ) -> EmbeddingJobStatus | None:
        """
        Count a failed attempt: back to PENDING, or FAILED once exhausted.

        Args:
            session: Async database session
            id: Job UUID
            error: Failure message stored on the job
            max_attempts: Attempts after which the job is dead-lettered

        Returns:
            The new status, or None if the job is gone or not PROCESSING
        """
        stmt = select(EmbeddingJobModel.attempts).where(
            EmbeddingJobModel.id == id,
            EmbeddingJobModel.status == EmbeddingJobStatus.PROCESSING,
        )
        attempts = (await session.execute(stmt)).scalar_one_or_none()
        if attempts is None:
            return None

        attempts += 1
        status = (
            EmbeddingJobStatus.FAILED
            if attempts >= max_attempts
            else EmbeddingJobStatus.PENDING
        )
        stmt = (
            update(EmbeddingJobModel)
            .where(
                EmbeddingJobModel.id == id,
                EmbeddingJobModel.status == EmbeddingJobStatus.PROCESSING,
                EmbeddingJobModel.attempts == attempts - 1,
            )
            .values(status=status, attempts=attempts, error=error)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        if result.rowcount == 0:
            return None
        return status

    async def purge_failed(self, session: AsyncSession, older_than: datetime) -> int:
        """
        Delete FAILED jobs last updated before ``older_than``.

        Returns:
            Number of jobs deleted
        """
        stmt = delete(EmbeddingJobModel).where(
            EmbeddingJobModel.status == EmbeddingJobStatus.FAILED,
            EmbeddingJobModel.updated_at < older_than,
        )
        result = await session.execute(stmt)
        return result.rowcount

    async def requeue_stuck(self, session: AsyncSession, claimed_before: datetime) -> int:
        """
        Return PROCESSING jobs claimed before ``claimed_before`` to PENDING.

        Recovers jobs held by a worker that died mid-attempt. The attempt
        counter is left unchanged.

        Returns:
            Number of jobs requeued
        """
        stmt = (
            update(EmbeddingJobModel)
            .where(
                EmbeddingJobModel.status == EmbeddingJobStatus.PROCESSING,
                EmbeddingJobModel.last_attempt_at < claimed_before,
            )
            .values(status=EmbeddingJobStatus.PENDING)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount

    async def count_by_status(self, session: AsyncSession) -> dict[EmbeddingJobStatus, int]:
        """Number of jobs per status (statuses with no jobs report 0)."""
        stmt = select(EmbeddingJobModel.status, func.count()).group_by(
            EmbeddingJobModel.status
        )
        result = await session.execute(stmt)
        counts = {status: 0 for status in EmbeddingJobStatus}
        for status, count in result.all():
            counts[status] = count
        return counts

    async def list_for_entity(
        self,
        session: AsyncSession,
        entity_type: EntityType,
        entity_id: UUID,
    ) -> Sequence[EmbeddingJobModel]:
        """Jobs of a document ordered by chunk_index."""
        stmt = (
            select(EmbeddingJobModel)
            .where(
                EmbeddingJobModel.entity_type == entity_type,
                EmbeddingJobModel.entity_id == entity_id,
            )
            .order_by(EmbeddingJobModel.chunk_index)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalars().all()


embedding_job_crud = EmbeddingJobCRUD()
