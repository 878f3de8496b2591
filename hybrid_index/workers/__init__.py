"""
Celery workers module.

Embedding job processing and periodic index maintenance.

Dependencies: celery, hybrid_index.configs
System role: Background task processing
"""

from celery import Celery
from celery.signals import setup_logging

from hybrid_index.configs import get_settings
from hybrid_index.observability.logger import configure_logging

settings = get_settings()
celery_config = settings.celery

celery_app = Celery(
    "hybrid_index",
    broker=celery_config.broker_url,
    backend=celery_config.result_backend_url,
    include=["hybrid_index.workers.tasks.embedding_tasks"],
)

celery_app.conf.update(
    task_serializer=celery_config.task_serializer,
    result_serializer=celery_config.result_serializer,
    accept_content=celery_config.accept_content,
    timezone=celery_config.timezone,
    beat_schedule={
        "process-embedding-jobs": {
            "task": "hybrid_index.workers.tasks.embedding_tasks.process_embedding_jobs",
            "schedule": celery_config.process_jobs_interval,
        },
        "purge-failed-embedding-jobs": {
            "task": "hybrid_index.workers.tasks.embedding_tasks.purge_failed_embedding_jobs",
            "schedule": celery_config.purge_failed_interval,
        },
        "requeue-stuck-embedding-jobs": {
            "task": "hybrid_index.workers.tasks.embedding_tasks.requeue_stuck_embedding_jobs",
            "schedule": celery_config.requeue_stuck_interval,
        },
        "reindex-stale-notes": {
            "task": "hybrid_index.workers.tasks.embedding_tasks.reindex_stale_notes",
            "schedule": celery_config.stale_sweep_interval,
        },
    },
)


@setup_logging.connect
def _configure_worker_logging(**kwargs) -> None:
    """Use the application log format instead of Celery's default handlers."""
    configure_logging()
