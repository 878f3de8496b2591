"""
Database models package.

Exports:
  - NoteModel, ThoughtModel, TagModel, NoteTagModel: Source documents and taxonomy
  - ChunkModel: Embeddable content segments
  - EmbeddingJobModel, EmbeddingJobStatus: Embedding work queue

Dependencies: sqlalchemy, pgvector, hybrid_index.boundary.db.base
System role: Database model definitions for domain entities
"""

from hybrid_index.boundary.db.models.note_model import NoteModel
from hybrid_index.boundary.db.models.thought_model import ThoughtModel
from hybrid_index.boundary.db.models.tag_model import NoteTagModel, TagModel
from hybrid_index.boundary.db.models.chunk_model import ChunkModel
from hybrid_index.boundary.db.models.embedding_job_model import (
    EmbeddingJobModel,
    EmbeddingJobStatus,
)

__all__ = [
    "ChunkModel",
    "EmbeddingJobModel",
    "EmbeddingJobStatus",
    "NoteModel",
    "NoteTagModel",
    "TagModel",
    "ThoughtModel",
]
