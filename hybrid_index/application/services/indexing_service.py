"""
Indexing service orchestrator.

Turns a document's current content into a fresh chunk set plus one PENDING
embedding job per chunk. The old chunk set and any in-flight jobs are
replaced in the same transaction, so readers see either the old index or
the new one.

Dependencies: hybrid_index.core.indexing, hybrid_index.boundary.db
System role: Indexing orchestration (rebuild, remove, stale sweep)
"""

import asyncio
import logging
import time
from datetime import timedelta
from typing import Any
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from hybrid_index.boundary.db.base import utc_now
from hybrid_index.boundary.db.connection import get_async_session_factory
from hybrid_index.boundary.db.CRUD.chunk_crud import chunk_crud
from hybrid_index.boundary.db.CRUD.embedding_job_crud import embedding_job_crud
from hybrid_index.boundary.db.CRUD.note_crud import note_crud
from hybrid_index.configs import get_settings
from hybrid_index.configs.indexing import IndexingSettings
from hybrid_index.core.exceptions import StoreError
from hybrid_index.core.indexing import TextChunker, normalize, prepare_content, should_reindex
from hybrid_index.models.entity import EntityType
from hybrid_index.models.indexing import IndexingResult, SweepReport
from hybrid_index.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


class IndexingService:
    """
    Indexing service orchestrator.

    Every public method commits its own transaction and rolls back on a
    store failure.
    """

    def __init__(
        self,
        db: AsyncSession,
        chunker: TextChunker | None = None,
        settings: IndexingSettings | None = None,
    ) -> None:
        """
        Initialize indexing service.

        Args:
            db: AsyncSession for chunk and job writes
            chunker: Optional TextChunker (built from settings if None)
            settings: Optional indexing settings (application settings if None)
        """
        self.db = db
        self.settings = settings or get_settings().indexing
        self.chunker = chunker or TextChunker(
            chunk_size=self.settings.chunk_size,
            chunk_overlap=self.settings.chunk_overlap,
            min_chunk_size=self.settings.min_chunk_size,
            sentence_window=self.settings.sentence_window,
        )

    async def reindex(
        self,
        entity_type: EntityType,
        entity_id: UUID,
        owner_id: str,
        tenant_id: str,
        title: str | None = None,
        raw_content: str | None = None,
        rich_state: str | dict | None = None,
    ) -> IndexingResult:
        """
        Rebuild the chunk set and embedding jobs of one document.

        Steps:
        1. Normalize the body and prepend the title
        2. Chunk (nothing when shorter than the minimum chunk size)
        3. In one transaction: delete old chunks and non-terminal jobs,
           insert new chunks and one PENDING job per chunk

        Text below the minimum size still clears the previous index, so
        shrinking a document to almost nothing leaves no stale chunks.

        Args:
            entity_type: NOTE or THOUGHT
            entity_id: Document id
            owner_id: Owner that triggered indexing
            tenant_id: Tenant scope
            title: Optional title
            raw_content: Plain text or markup body
            rich_state: Optional serialized editor state (preferred)

        Returns:
            IndexingResult: Counts of created and removed rows

        Raises:
            StoreError: If the transaction fails (rolled back)
        """
        text = prepare_content(title, normalize(raw_content, rich_state))
        skipped = len(text) < self.chunker.min_chunk_size
        segments = [] if skipped else self.chunker.chunk(text)

        try:
            removed_chunks = await chunk_crud.delete_for_entity(self.db, entity_type, entity_id)
            removed_jobs = await embedding_job_crud.delete_active_for_entity(
                self.db, entity_type, entity_id
            )
            if segments:
                chunks = await chunk_crud.create_for_entity(
                    self.db, entity_type, entity_id, tenant_id, segments
                )
                await embedding_job_crud.create_for_chunks(self.db, chunks, owner_id)
            if entity_type == EntityType.NOTE:
                await note_crud.mark_indexed(self.db, entity_id, utc_now())
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StoreError(
                f"Failed to reindex {entity_type.value} {entity_id}: {e}",
                operation="reindex",
                details={"entity_type": entity_type.value, "entity_id": str(entity_id)},
            ) from e

        logger.info(
            f"{__name__}:reindex - {entity_type.value} {entity_id}: "
            f"{len(segments)} chunks queued, {removed_chunks} removed, "
            f"{removed_jobs} pending jobs cancelled"
        )
        return IndexingResult(
            entity_type=entity_type,
            entity_id=entity_id,
            chunk_count=len(segments),
            removed_chunks=removed_chunks,
            removed_jobs=removed_jobs,
            skipped=skipped,
        )

    async def reindex_if_changed(
        self,
        entity_type: EntityType,
        entity_id: UUID,
        owner_id: str,
        tenant_id: str,
        previous: dict[str, Any],
        title: str | None = None,
        raw_content: str | None = None,
        rich_state: str | dict | None = None,
    ) -> IndexingResult | None:
        """
        Reindex only when the edit is significant.

        Args:
            previous: Prior ``title``, ``raw_content`` and ``rich_state``
            (remaining args as in reindex)

        Returns:
            IndexingResult, or None when the change gate rejected the edit
        """
        old_text = prepare_content(
            previous.get("title"),
            normalize(previous.get("raw_content"), previous.get("rich_state")),
        )
        new_text = prepare_content(title, normalize(raw_content, rich_state))
        if not should_reindex(old_text, new_text, self.settings.similarity_threshold):
            logger.debug(
                f"{__name__}:reindex_if_changed - {entity_type.value} {entity_id} unchanged"
            )
            return None
        return await self.reindex(
            entity_type, entity_id, owner_id, tenant_id, title, raw_content, rich_state
        )

    async def remove_document(self, entity_type: EntityType, entity_id: UUID) -> IndexingResult:
        """
        Delete a document's chunks and non-terminal jobs.

        Raises:
            StoreError: If the transaction fails (rolled back)
        """
        try:
            removed_chunks = await chunk_crud.delete_for_entity(self.db, entity_type, entity_id)
            removed_jobs = await embedding_job_crud.delete_active_for_entity(
                self.db, entity_type, entity_id
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StoreError(
                f"Failed to remove index of {entity_type.value} {entity_id}: {e}",
                operation="remove_document",
            ) from e

        return IndexingResult(
            entity_type=entity_type,
            entity_id=entity_id,
            removed_chunks=removed_chunks,
            removed_jobs=removed_jobs,
        )

    async def reindex_stale_notes(
        self,
        cooldown_seconds: int | None = None,
        batch_size: int | None = None,
    ) -> SweepReport:
        """
        Reindex notes edited since their last indexing.

        A note qualifies once its last edit is older than the cooldown and
        its last_indexed_at is missing or older than updated_at. One note
        failing does not stop the batch.

        Args:
            cooldown_seconds: Quiet period after an edit (default from settings)
            batch_size: Maximum notes per sweep (default from settings)

        Returns:
            SweepReport: Processed and failed counts
        """
        cooldown = (
            self.settings.stale_cooldown_seconds
            if cooldown_seconds is None
            else cooldown_seconds
        )
        limit = batch_size or self.settings.sweep_batch_size
        started = time.perf_counter()

        cutoff = utc_now() - timedelta(seconds=cooldown)
        try:
            notes = await note_crud.get_stale_notes(
                self.db, updated_before=cutoff, limit=limit
            )
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to load stale notes: {e}", operation="stale_sweep") from e

        # Rows expire on rollback; keep plain values
        pending = [
            (note.id, note.user_id, note.tenant_id, note.title, note.content, note.content_state)
            for note in notes
        ]

        report = SweepReport()
        for note_id, user_id, tenant_id, title, content, content_state in pending:
            try:
                await self.reindex(
                    EntityType.NOTE, note_id, user_id, tenant_id, title, content, content_state
                )
                report.processed += 1
            except Exception as e:
                report.failed += 1
                log_exception_with_context(
                    logger,
                    f"{__name__}:reindex_stale_notes - Failed to reindex note {note_id}",
                    e,
                    note_id=str(note_id),
                )

        report.duration_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"{__name__}:reindex_stale_notes - Swept {report.processed} notes "
            f"({report.failed} failed) in {report.duration_ms:.0f}ms"
        )
        return report


# Strong references keep detached tasks alive until they finish
_background_tasks: set[asyncio.Task] = set()


async def _run_indexing(
    session_factory: async_sessionmaker[AsyncSession],
    entity_type: EntityType,
    entity_id: UUID,
    owner_id: str,
    tenant_id: str,
    title: str | None,
    raw_content: str | None,
    rich_state: str | dict | None,
) -> IndexingResult | None:
    try:
        async with session_factory() as session:
            return await IndexingService(session).reindex(
                entity_type, entity_id, owner_id, tenant_id, title, raw_content, rich_state
            )
    except Exception as e:
        log_exception_with_context(
            logger,
            f"{__name__}:enqueue_indexing - Background indexing failed",
            e,
            entity_type=entity_type.value,
            entity_id=str(entity_id),
        )
        return None


def enqueue_indexing(
    entity_type: EntityType,
    entity_id: UUID,
    owner_id: str,
    tenant_id: str,
    title: str | None = None,
    raw_content: str | None = None,
    rich_state: str | dict | None = None,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> asyncio.Task:
    """
    Schedule a reindex without waiting for it.

    The reindex runs on its own session as a detached task. Failures are
    logged and never reach the caller. Must be called from a running event
    loop.

    Args:
        session_factory: Session factory for the background task (default:
            application database)
        (remaining args as in IndexingService.reindex)

    Returns:
        asyncio.Task: Resolves to the IndexingResult, or None on failure
    """
    factory = session_factory or get_async_session_factory()
    task = asyncio.create_task(
        _run_indexing(
            factory, entity_type, entity_id, owner_id, tenant_id, title, raw_content, rich_state
        )
    )
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)
    return task
