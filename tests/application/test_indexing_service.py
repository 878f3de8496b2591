"""
Test suite for IndexingService and enqueue_indexing.

Tests chunk/job rebuilds, replacement semantics, the minimum-size clear,
the change gate, document removal, the stale-note sweep and
fire-and-forget dispatch. Uses the in-memory SQLite database.

System role: Verification of the indexing orchestrator
"""

import json
import logging
import uuid
from datetime import timedelta
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import update
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from hybrid_index.application.services import indexing_service as indexing_module
from hybrid_index.application.services.indexing_service import IndexingService, enqueue_indexing
from hybrid_index.boundary.db.base import utc_now
from hybrid_index.boundary.db.CRUD.chunk_crud import chunk_crud
from hybrid_index.boundary.db.CRUD.embedding_job_crud import embedding_job_crud
from hybrid_index.boundary.db.CRUD.note_crud import note_crud
from hybrid_index.boundary.db.models import EmbeddingJobModel, EmbeddingJobStatus, NoteModel
from hybrid_index.core.exceptions import StoreError
from hybrid_index.models.entity import EntityType


@pytest.fixture
def indexing_service(test_async_db: AsyncSession, indexing_settings) -> IndexingService:
    """Provide IndexingService bound to the test database."""
    return IndexingService(test_async_db, settings=indexing_settings)


async def reindex_note(service: IndexingService, entity_id, owner_id, tenant_id, body: str, title="Note"):
    return await service.reindex(
        EntityType.NOTE, entity_id, owner_id, tenant_id, title=title, raw_content=body
    )


class TestReindex:
    """Test suite for IndexingService.reindex()."""

    @pytest.mark.asyncio
    async def test_reindex_should_create_one_pending_job_per_chunk(
        self, indexing_service, test_async_db, entity_id, owner_id, tenant_id, long_text
    ) -> None:
        """Test chunks are contiguous and each has a PENDING job with a content snapshot."""
        # Act
        result = await reindex_note(indexing_service, entity_id, owner_id, tenant_id, long_text)

        # Assert
        chunks = await chunk_crud.list_for_entity(test_async_db, EntityType.NOTE, entity_id)
        jobs = await embedding_job_crud.list_for_entity(test_async_db, EntityType.NOTE, entity_id)
        assert result.chunk_count == len(chunks) > 1
        assert [c.chunk_index for c in chunks] == list(range(len(chunks)))
        assert all(c.embedding is None and c.tenant_id == tenant_id for c in chunks)
        assert len(jobs) == len(chunks)
        for chunk, job in zip(chunks, jobs):
            assert job.chunk_id == chunk.id
            assert job.content == chunk.content
            assert job.status == EmbeddingJobStatus.PENDING
            assert job.attempts == 0
            assert job.user_id == owner_id

    @pytest.mark.asyncio
    async def test_reindex_should_prepend_title_to_first_chunk(
        self, indexing_service, test_async_db, entity_id, owner_id, tenant_id, long_text
    ) -> None:
        """Test the title is part of the indexed text."""
        # Act
        await reindex_note(indexing_service, entity_id, owner_id, tenant_id, long_text, title="Weekly plan")

        # Assert
        chunks = await chunk_crud.list_for_entity(test_async_db, EntityType.NOTE, entity_id)
        assert chunks[0].content.startswith("Weekly plan\n\nThis is sentence number 0")

    @pytest.mark.asyncio
    async def test_reindex_should_replace_chunk_set_for_identical_content(
        self, indexing_service, test_async_db, entity_id, owner_id, tenant_id, long_text
    ) -> None:
        """Test re-indexing identical content yields an equivalent set, never a merge."""
        # Arrange
        await reindex_note(indexing_service, entity_id, owner_id, tenant_id, long_text)
        first = await chunk_crud.list_for_entity(test_async_db, EntityType.NOTE, entity_id)
        first_view = [(c.chunk_index, c.content) for c in first]
        first_ids = {c.id for c in first}

        # Act
        result = await reindex_note(indexing_service, entity_id, owner_id, tenant_id, long_text)

        # Assert
        second = await chunk_crud.list_for_entity(test_async_db, EntityType.NOTE, entity_id)
        jobs = await embedding_job_crud.list_for_entity(test_async_db, EntityType.NOTE, entity_id)
        assert [(c.chunk_index, c.content) for c in second] == first_view
        assert first_ids.isdisjoint({c.id for c in second})
        assert result.removed_chunks == len(first_view)
        assert result.removed_jobs == len(first_view)
        assert len(jobs) == len(second)

    @pytest.mark.asyncio
    async def test_reindex_should_clear_index_when_content_drops_below_min_size(
        self, indexing_service, test_async_db, entity_id, owner_id, tenant_id, long_text
    ) -> None:
        """Test editing a document below min_size removes its chunks and jobs."""
        # Arrange
        first = await reindex_note(indexing_service, entity_id, owner_id, tenant_id, long_text)

        # Act
        result = await reindex_note(indexing_service, entity_id, owner_id, tenant_id, "tiny", title="")

        # Assert
        assert result.skipped is True
        assert result.chunk_count == 0
        assert result.removed_chunks == first.chunk_count
        assert await chunk_crud.list_for_entity(test_async_db, EntityType.NOTE, entity_id) == []
        assert await embedding_job_crud.list_for_entity(test_async_db, EntityType.NOTE, entity_id) == []

    @pytest.mark.asyncio
    async def test_reindex_should_keep_terminal_jobs(
        self, indexing_service, test_async_db, entity_id, owner_id, tenant_id, long_text
    ) -> None:
        """Test only PENDING and PROCESSING jobs are cancelled by a rebuild."""
        # Arrange
        first = await reindex_note(indexing_service, entity_id, owner_id, tenant_id, long_text)
        jobs = await embedding_job_crud.list_for_entity(test_async_db, EntityType.NOTE, entity_id)
        await test_async_db.execute(
            update(EmbeddingJobModel)
            .where(EmbeddingJobModel.id == jobs[0].id)
            .values(status=EmbeddingJobStatus.COMPLETED)
        )
        await test_async_db.commit()

        # Act
        result = await reindex_note(indexing_service, entity_id, owner_id, tenant_id, long_text)

        # Assert
        assert result.removed_jobs == first.chunk_count - 1

    @pytest.mark.asyncio
    async def test_reindex_should_prefer_rich_state(
        self, indexing_service, test_async_db, entity_id, owner_id, tenant_id
    ) -> None:
        """Test the editor state is indexed instead of the raw body."""
        # Arrange
        paragraph = "Rich editor paragraph that is comfortably longer than the minimum chunk size. " * 2
        state = {"root": {"children": [{"type": "paragraph", "children": [{"type": "text", "text": paragraph}]}]}}

        # Act
        await indexing_service.reindex(
            EntityType.THOUGHT, entity_id, owner_id, tenant_id, raw_content="stale body", rich_state=state
        )

        # Assert
        chunks = await chunk_crud.list_for_entity(test_async_db, EntityType.THOUGHT, entity_id)
        assert [c.content for c in chunks] == [paragraph.strip()]

    @pytest.mark.asyncio
    async def test_reindex_should_stamp_note_last_indexed_at(
        self, indexing_service, test_async_db, owner_id, tenant_id, long_text
    ) -> None:
        """Test a reindexed note records when it was indexed."""
        # Arrange
        note = NoteModel(user_id=owner_id, tenant_id=tenant_id, title="T", content=long_text)
        test_async_db.add(note)
        await test_async_db.commit()

        # Act
        await reindex_note(indexing_service, note.id, owner_id, tenant_id, long_text)

        # Assert
        stored = await note_crud.get_by_id(test_async_db, note.id)
        assert stored.last_indexed_at is not None

    @pytest.mark.asyncio
    async def test_reindex_should_rollback_and_raise_store_error(
        self, entity_id, owner_id, tenant_id, long_text, indexing_settings
    ) -> None:
        """Test a failed transaction is rolled back and surfaced as StoreError."""
        # Arrange
        db = AsyncMock(spec=AsyncSession)
        db.execute.side_effect = OperationalError("DELETE", {}, Exception("db down"))
        service = IndexingService(db, settings=indexing_settings)

        # Act & Assert
        with pytest.raises(StoreError) as exc_info:
            await reindex_note(service, entity_id, owner_id, tenant_id, long_text)

        assert exc_info.value.details["operation"] == "reindex"
        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()


class TestReindexIfChanged:
    """Test suite for IndexingService.reindex_if_changed()."""

    @pytest.mark.asyncio
    async def test_reindex_if_changed_should_skip_minor_edits(
        self, indexing_service, entity_id, owner_id, tenant_id, long_text
    ) -> None:
        """Test an edit above the similarity threshold does not reindex."""
        # Arrange
        previous = {"title": "Note", "raw_content": long_text}

        # Act
        result = await indexing_service.reindex_if_changed(
            EntityType.NOTE, entity_id, owner_id, tenant_id, previous,
            title="Note", raw_content=long_text[:-1] + "!",
        )

        # Assert
        assert result is None

    @pytest.mark.asyncio
    async def test_reindex_if_changed_should_reindex_significant_edits(
        self, indexing_service, entity_id, owner_id, tenant_id, long_text
    ) -> None:
        """Test a rewritten document is reindexed."""
        # Arrange
        previous = {"title": "Note", "raw_content": "Completely different earlier draft."}

        # Act
        result = await indexing_service.reindex_if_changed(
            EntityType.NOTE, entity_id, owner_id, tenant_id, previous,
            title="Note", raw_content=long_text,
        )

        # Assert
        assert result is not None
        assert result.chunk_count > 1


class TestRemoveDocument:
    """Test suite for IndexingService.remove_document()."""

    @pytest.mark.asyncio
    async def test_remove_document_should_delete_chunks_and_pending_jobs(
        self, indexing_service, test_async_db, entity_id, owner_id, tenant_id, long_text
    ) -> None:
        """Test a trashed document disappears from the index."""
        # Arrange
        created = await reindex_note(indexing_service, entity_id, owner_id, tenant_id, long_text)

        # Act
        result = await indexing_service.remove_document(EntityType.NOTE, entity_id)

        # Assert
        assert result.removed_chunks == created.chunk_count
        assert result.removed_jobs == created.chunk_count
        assert await chunk_crud.list_for_entity(test_async_db, EntityType.NOTE, entity_id) == []


class TestReindexStaleNotes:
    """Test suite for IndexingService.reindex_stale_notes()."""

    @pytest.mark.asyncio
    async def test_sweep_should_reindex_only_quiet_unindexed_notes(
        self, indexing_service, test_async_db, owner_id, tenant_id, long_text
    ) -> None:
        """Test the sweep skips fresh edits, deleted notes and up-to-date notes."""
        # Arrange
        now = utc_now()
        stale = NoteModel(
            user_id=owner_id, tenant_id=tenant_id, title="Stale", content=long_text,
            updated_at=now - timedelta(minutes=5),
        )
        fresh = NoteModel(
            user_id=owner_id, tenant_id=tenant_id, title="Fresh", content=long_text,
            updated_at=now,
        )
        deleted = NoteModel(
            user_id=owner_id, tenant_id=tenant_id, title="Deleted", content=long_text,
            updated_at=now - timedelta(minutes=5), deleted_at=now,
        )
        indexed = NoteModel(
            user_id=owner_id, tenant_id=tenant_id, title="Indexed", content=long_text,
            updated_at=now - timedelta(minutes=10), last_indexed_at=now - timedelta(minutes=9),
        )
        test_async_db.add_all([stale, fresh, deleted, indexed])
        await test_async_db.commit()

        # Act
        report = await indexing_service.reindex_stale_notes()

        # Assert
        assert report.processed == 1
        assert report.failed == 0
        assert await chunk_crud.list_for_entity(test_async_db, EntityType.NOTE, stale.id)
        assert await chunk_crud.list_for_entity(test_async_db, EntityType.NOTE, fresh.id) == []
        second = await indexing_service.reindex_stale_notes()
        assert second.processed == 0

    @pytest.mark.asyncio
    async def test_sweep_should_continue_after_a_failed_note(
        self, indexing_service, test_async_db, owner_id, tenant_id, long_text
    ) -> None:
        """Test one failing note does not stop the batch."""
        # Arrange
        old = utc_now() - timedelta(minutes=5)
        test_async_db.add_all([
            NoteModel(user_id=owner_id, tenant_id=tenant_id, title=f"N{i}", content=long_text, updated_at=old)
            for i in range(3)
        ])
        await test_async_db.commit()
        real_reindex = indexing_service.reindex
        calls = {"count": 0}

        async def flaky_reindex(*args, **kwargs):
            calls["count"] += 1
            if calls["count"] == 1:
                raise StoreError("boom", operation="reindex")
            return await real_reindex(*args, **kwargs)

        # Act
        with patch.object(indexing_service, "reindex", side_effect=flaky_reindex):
            report = await indexing_service.reindex_stale_notes()

        # Assert
        assert report.processed == 2
        assert report.failed == 1

    @pytest.mark.asyncio
    async def test_sweep_should_not_stall_behind_a_note_that_fails_to_normalize(
        self, indexing_service, test_async_db, owner_id, tenant_id, long_text
    ) -> None:
        """Test an unexpected per-note error is counted and later notes are still indexed."""
        # Arrange
        now = utc_now()
        broken_state = json.dumps({"root": {"children": [{"type": "broken"}]}})
        broken = NoteModel(
            user_id=owner_id, tenant_id=tenant_id, title="Broken", content="body",
            content_state=broken_state, updated_at=now - timedelta(minutes=10),
        )
        healthy = NoteModel(
            user_id=owner_id, tenant_id=tenant_id, title="Healthy", content=long_text,
            updated_at=now - timedelta(minutes=5),
        )
        test_async_db.add_all([broken, healthy])
        await test_async_db.commit()
        real_normalize = indexing_module.normalize

        def failing_normalize(raw_content, rich_state=None):
            if rich_state == broken_state:
                raise RecursionError("maximum recursion depth exceeded")
            return real_normalize(raw_content, rich_state)

        # Act
        with patch.object(indexing_module, "normalize", side_effect=failing_normalize):
            report = await indexing_service.reindex_stale_notes()
            retry = await indexing_service.reindex_stale_notes()

        # Assert
        assert report.processed == 1
        assert report.failed == 1
        assert await chunk_crud.list_for_entity(test_async_db, EntityType.NOTE, healthy.id)
        assert retry.processed == 0
        assert retry.failed == 1


class TestEnqueueIndexing:
    """Test suite for enqueue_indexing()."""

    @pytest.mark.asyncio
    async def test_enqueue_should_index_in_background_session(
        self, session_factory, entity_id, owner_id, tenant_id, long_text
    ) -> None:
        """Test the detached task rebuilds the index on its own session."""
        # Act
        task = enqueue_indexing(
            EntityType.NOTE, entity_id, owner_id, tenant_id,
            title="Note", raw_content=long_text, session_factory=session_factory,
        )
        result = await task

        # Assert
        assert result.chunk_count > 1
        async with session_factory() as session:
            chunks = await chunk_crud.list_for_entity(session, EntityType.NOTE, entity_id)
        assert len(chunks) == result.chunk_count

    @pytest.mark.asyncio
    async def test_enqueue_should_log_and_swallow_failures(
        self, session_factory, owner_id, tenant_id, caplog
    ) -> None:
        """Test background failures are logged, never raised to the caller."""
        # Arrange
        caplog.set_level(logging.ERROR)

        # Act
        with patch(
            "hybrid_index.application.services.indexing_service.IndexingService.reindex",
            side_effect=StoreError("db down", operation="reindex"),
        ):
            task = enqueue_indexing(
                EntityType.NOTE, uuid.uuid4(), owner_id, tenant_id,
                raw_content="anything", session_factory=session_factory,
            )
            result = await task

        # Assert
        assert result is None
        assert "Background indexing failed" in caplog.text
