"""
Embedding queue and index maintenance Celery tasks.

Tasks:
  - process_embedding_jobs(batch_size): drain PENDING jobs
  - purge_failed_embedding_jobs(): delete FAILED jobs past retention
  - requeue_stuck_embedding_jobs(): recover jobs held by dead workers
  - reindex_stale_notes(): reindex notes edited since last indexing

Each task bridges into asyncio with asyncio.run and disposes the engine
before the loop closes, since pooled connections belong to that loop.

Dependencies: celery, hybrid_index.application, hybrid_index.workers
System role: Scheduled background processing
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from hybrid_index.application.services.embedding_job_service import EmbeddingJobService
from hybrid_index.application.services.indexing_service import IndexingService
from hybrid_index.boundary.db.connection import get_async_engine, get_async_session_factory
from hybrid_index.workers import celery_app
from hybrid_index.workers.embedding_worker import EmbeddingWorker

T = TypeVar("T")


def _run(work: Callable[[], Awaitable[T]]) -> T:
    async def runner() -> T:
        try:
            return await work()
        finally:
            await get_async_engine().dispose()

    return asyncio.run(runner())


@celery_app.task(bind=True)
def process_embedding_jobs(self, batch_size: int | None = None) -> dict:
    """
    Process one batch of PENDING embedding jobs.

    Args:
        batch_size: Maximum jobs claimed (default from settings)

    Returns:
        dict: WorkerReport counts
    """
    report = _run(lambda: EmbeddingWorker().run_once(batch_size))
    return report.model_dump()


@celery_app.task(bind=True)
def purge_failed_embedding_jobs(self) -> dict:
    """
    Delete FAILED jobs older than the retention window.

    Returns:
        dict: Number of purged jobs
    """

    async def work() -> int:
        async with get_async_session_factory()() as session:
            return await EmbeddingJobService(session).purge_failed()

    return {"purged": _run(work)}


@celery_app.task(bind=True)
def requeue_stuck_embedding_jobs(self) -> dict:
    """
    Return jobs stuck in PROCESSING to PENDING.

    Returns:
        dict: Number of requeued jobs
    """

    async def work() -> int:
        async with get_async_session_factory()() as session:
            return await EmbeddingJobService(session).requeue_stuck()

    return {"requeued": _run(work)}


@celery_app.task(bind=True)
def reindex_stale_notes(self) -> dict:
    """
    Reindex notes edited since their last indexing.

    Returns:
        dict: SweepReport counts
    """

    async def work():
        async with get_async_session_factory()() as session:
            return await IndexingService(session).reindex_stale_notes()

    return _run(work).model_dump()
