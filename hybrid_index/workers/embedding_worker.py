"""
Embedding worker loop.

One pass claims a batch of PENDING jobs, asks the provider for each
chunk's vector and finalizes every job in its own session and
transaction. A provider failure counts an attempt against the job; a
store failure on one job is logged and does not affect the others.

Dependencies: tenacity, hybrid_index.application, hybrid_index.boundary
System role: Embedding job consumer (driven by Celery beat)
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from hybrid_index.application.services.embedding_job_service import (
    EmbeddingJobService,
    JobOutcome,
)
from hybrid_index.boundary.db.connection import get_async_session_factory
from hybrid_index.boundary.embeddings.provider import EmbeddingProvider
from hybrid_index.configs import get_settings
from hybrid_index.configs.indexing import IndexingSettings
from hybrid_index.core.exceptions import ProviderError, StoreError
from hybrid_index.models.indexing import ClaimedJob, WorkerReport
from hybrid_index.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
)

logger = logging.getLogger(__name__)


class EmbeddingWorker:
    """
    Claims and processes embedding jobs.

    Several workers may run concurrently against the same store; claims
    are compare-and-swap so each job is processed by at most one of them.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        provider: EmbeddingProvider | None = None,
        settings: IndexingSettings | None = None,
    ) -> None:
        """
        Initialize worker.

        Args:
            session_factory: Session factory (application database if None)
            provider: Embedding provider (default provider if None)
            settings: Indexing settings (application settings if None)
        """
        self.session_factory = session_factory or get_async_session_factory()
        self.provider = provider or EmbeddingProvider()
        self.settings = settings or get_settings().indexing

    @retry(
        retry=retry_if_exception_type(StoreError),
        stop=stop_after_attempt(3),
        wait=wait_exponential_jitter(initial=1, max=10, jitter=1),
        before_sleep=lambda retry_state: logger.warning(
            f"{__name__}:_claim_batch - Retry {retry_state.attempt_number}/3 after store error"
        ),
        reraise=True,
    )
    async def _claim_batch(self, batch_size: int) -> list[ClaimedJob]:
        """Claim jobs with retry on transient store errors."""
        async with self.session_factory() as session:
            return await EmbeddingJobService(session, self.settings).claim_next(batch_size)

    async def process_job(self, job: ClaimedJob) -> JobOutcome:
        """
        Embed one claimed job and finalize it.

        Args:
            job: Job claimed by this worker

        Returns:
            JobOutcome: COMPLETED, RETRY, FAILED or STALE

        Raises:
            StoreError: If finalizing the job failed (job stays PROCESSING)
        """
        try:
            vector = await self.provider.embed(job.content, as_document=True)
        except ProviderError as e:
            async with self.session_factory() as session:
                return await EmbeddingJobService(session, self.settings).fail(job.id, str(e))

        async with self.session_factory() as session:
            return await EmbeddingJobService(session, self.settings).complete(
                job.id, job.chunk_id, vector
            )

    async def run_once(self, batch_size: int | None = None) -> WorkerReport:
        """
        Process one batch of PENDING jobs.

        Args:
            batch_size: Maximum jobs claimed (default: worker_batch_size)

        Returns:
            WorkerReport: Per-outcome counts

        Raises:
            StoreError: If the batch could not be claimed after retries
        """
        jobs = await self._claim_batch(batch_size or self.settings.worker_batch_size)
        report = WorkerReport(claimed=len(jobs))

        for job in jobs:
            try:
                outcome = await self.process_job(job)
            except StoreError as e:
                report.errors += 1
                log_exception_with_context(
                    logger,
                    f"{__name__}:run_once - Failed to finalize job {job.id}",
                    e,
                    job_id=str(job.id),
                    chunk_id=str(job.chunk_id),
                )
                continue

            if outcome == JobOutcome.COMPLETED:
                report.completed += 1
            elif outcome == JobOutcome.RETRY:
                report.retried += 1
            elif outcome == JobOutcome.FAILED:
                report.failed += 1
            else:
                report.stale += 1

        if jobs:
            log_with_context(
                logger,
                logging.INFO,
                f"{__name__}:run_once - Processed {report.claimed} jobs",
                **report.model_dump(),
            )
        return report
