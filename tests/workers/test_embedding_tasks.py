"""
Test suite for the Celery task wrappers.

Tasks are executed eagerly via ``.run`` with the worker, services and
engine patched, so no broker or database is required.

System role: Verification of scheduled task wiring
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from hybrid_index.models.indexing import SweepReport, WorkerReport
from hybrid_index.workers import celery_app
from hybrid_index.workers.tasks import embedding_tasks

MODULE = "hybrid_index.workers.tasks.embedding_tasks"


def _session_factory() -> MagicMock:
    """Session factory whose sessions work as async context managers."""
    session = AsyncMock()
    session_cm = MagicMock()
    session_cm.__aenter__ = AsyncMock(return_value=session)
    session_cm.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=session_cm)


class TestBeatSchedule:
    """Test suite for the periodic schedule."""

    def test_beat_schedule_should_register_every_maintenance_task(self) -> None:
        """Test all four tasks are scheduled."""
        # Act
        scheduled = {entry["task"] for entry in celery_app.conf.beat_schedule.values()}

        # Assert
        assert scheduled == {
            f"{MODULE}.process_embedding_jobs",
            f"{MODULE}.purge_failed_embedding_jobs",
            f"{MODULE}.requeue_stuck_embedding_jobs",
            f"{MODULE}.reindex_stale_notes",
        }


class TestEmbeddingTasks:
    """Test suite for task bodies."""

    def test_process_embedding_jobs_should_return_worker_report(self) -> None:
        """Test the worker pass runs and the engine is disposed."""
        # Arrange
        with patch(f"{MODULE}.EmbeddingWorker") as mock_worker, patch(
            f"{MODULE}.get_async_engine"
        ) as mock_engine:
            mock_worker.return_value.run_once = AsyncMock(
                return_value=WorkerReport(claimed=2, completed=2)
            )
            mock_engine.return_value.dispose = AsyncMock()

            # Act
            result = embedding_tasks.process_embedding_jobs.run(batch_size=5)

        # Assert
        assert result["claimed"] == 2
        assert result["completed"] == 2
        mock_worker.return_value.run_once.assert_awaited_once_with(5)
        mock_engine.return_value.dispose.assert_awaited_once()

    def test_process_embedding_jobs_should_dispose_engine_on_failure(self) -> None:
        """Test the engine is disposed even when the pass raises."""
        # Arrange
        with patch(f"{MODULE}.EmbeddingWorker") as mock_worker, patch(
            f"{MODULE}.get_async_engine"
        ) as mock_engine:
            mock_worker.return_value.run_once = AsyncMock(side_effect=RuntimeError("boom"))
            mock_engine.return_value.dispose = AsyncMock()

            # Act
            with pytest.raises(RuntimeError):
                embedding_tasks.process_embedding_jobs.run()

        # Assert
        mock_engine.return_value.dispose.assert_awaited_once()

    def test_purge_failed_embedding_jobs_should_report_count(self) -> None:
        """Test purge delegates to the job service."""
        # Arrange
        with patch(f"{MODULE}.EmbeddingJobService") as mock_service, patch(
            f"{MODULE}.get_async_session_factory", return_value=_session_factory()
        ), patch(f"{MODULE}.get_async_engine") as mock_engine:
            mock_service.return_value.purge_failed = AsyncMock(return_value=3)
            mock_engine.return_value.dispose = AsyncMock()

            # Act
            result = embedding_tasks.purge_failed_embedding_jobs.run()

        # Assert
        assert result == {"purged": 3}

    def test_requeue_stuck_embedding_jobs_should_report_count(self) -> None:
        """Test requeue delegates to the job service."""
        # Arrange
        with patch(f"{MODULE}.EmbeddingJobService") as mock_service, patch(
            f"{MODULE}.get_async_session_factory", return_value=_session_factory()
        ), patch(f"{MODULE}.get_async_engine") as mock_engine:
            mock_service.return_value.requeue_stuck = AsyncMock(return_value=1)
            mock_engine.return_value.dispose = AsyncMock()

            # Act
            result = embedding_tasks.requeue_stuck_embedding_jobs.run()

        # Assert
        assert result == {"requeued": 1}

    def test_reindex_stale_notes_should_return_sweep_report(self) -> None:
        """Test the stale sweep delegates to the indexing service."""
        # Arrange
        with patch(f"{MODULE}.IndexingService") as mock_service, patch(
            f"{MODULE}.get_async_session_factory", return_value=_session_factory()
        ), patch(f"{MODULE}.get_async_engine") as mock_engine:
            mock_service.return_value.reindex_stale_notes = AsyncMock(
                return_value=SweepReport(processed=4, failed=1)
            )
            mock_engine.return_value.dispose = AsyncMock()

            # Act
            result = embedding_tasks.reindex_stale_notes.run()

        # Assert
        assert result["processed"] == 4
        assert result["failed"] == 1
