"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(): Async connection management
  - NoteModel, ThoughtModel, TagModel, NoteTagModel: Source documents (read-only here)
  - ChunkModel, EmbeddingJobModel, EmbeddingJobStatus: Index and job queue
  - chunk_crud, embedding_job_crud, note_crud, SearchCRUD: CRUD operations

Dependencies: sqlalchemy, pgvector, hybrid_index.configs
System role: Database adapter providing persistent storage for chunks,
embedding jobs and the search read model.
"""

from hybrid_index.boundary.db.base import Base, TimestampMixin, UUIDMixin
from hybrid_index.boundary.db.connection import (
    get_async_engine,
    get_async_session_factory,
)
from hybrid_index.boundary.db.models import (
    ChunkModel,
    EmbeddingJobModel,
    EmbeddingJobStatus,
    NoteModel,
    NoteTagModel,
    TagModel,
    ThoughtModel,
)
from hybrid_index.boundary.db.CRUD import (
    SearchCRUD,
    chunk_crud,
    embedding_job_crud,
    note_crud,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "get_async_engine",
    "get_async_session_factory",
    "ChunkModel",
    "EmbeddingJobModel",
    "EmbeddingJobStatus",
    "NoteModel",
    "NoteTagModel",
    "TagModel",
    "ThoughtModel",
    "SearchCRUD",
    "chunk_crud",
    "embedding_job_crud",
    "note_crud",
]
