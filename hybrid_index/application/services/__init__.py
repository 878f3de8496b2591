"""Service orchestrators."""

from .embedding_job_service import EmbeddingJobService, JobOutcome
from .indexing_service import IndexingService, enqueue_indexing
from .search_service import SearchService

__all__ = [
    "EmbeddingJobService",
    "IndexingService",
    "JobOutcome",
    "SearchService",
    "enqueue_indexing",
]
