"""
Chunk ORM model.

One row per bounded segment of a note's or thought's canonical text.
Embeddings are written by the embedding worker; until then they are NULL
and the chunk is invisible to vector search.

Dependencies: sqlalchemy, pgvector, hybrid_index.boundary.db.base
System role: Vector-searchable content segments
"""

import uuid

from pgvector.sqlalchemy import Vector
from sqlalchemy import Enum, Index, Integer, JSON, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from hybrid_index.boundary.db.base import Base, TimestampMixin, UUIDMixin
from hybrid_index.configs import get_settings
from hybrid_index.models.entity import EntityType

EMBEDDING_DIMENSIONS = get_settings().embedding.dimensions


class ChunkModel(Base, UUIDMixin, TimestampMixin):
    """
    Chunk ORM model.

    A document's chunk set is replaced wholesale on every re-index, and each
    rebuild issues fresh chunk ids, so a worker holding an id from an older
    generation can never write into a newer chunk.

    Attributes:
        id: UUID primary key (new on every rebuild)
        entity_type: NOTE or THOUGHT
        entity_id: Owning note or thought id
        tenant_id: Tenant scope (denormalized for vector search filtering)
        chunk_index: 0-based position; contiguous within a document
        content: Chunk text
        embedding: pgvector column on PostgreSQL (JSON list elsewhere); NULL until embedded

    Constraints:
        (entity_type, entity_id, chunk_index): UNIQUE; concurrent rebuilds of
        the same document cannot interleave their chunk sets
    """

    __tablename__ = "chunks"

    entity_type: Mapped[EntityType] = mapped_column(
        Enum(EntityType, native_enum=False),
        nullable=False,
    )
    entity_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    tenant_id: Mapped[str] = mapped_column(String(255), nullable=False)
    chunk_index: Mapped[int] = mapped_column(Integer, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    embedding: Mapped[list[float] | None] = mapped_column(
        Vector(EMBEDDING_DIMENSIONS).with_variant(JSON(), "sqlite"),
        nullable=True,
        default=None,
    )

    __table_args__ = (
        UniqueConstraint(
            "entity_type", "entity_id", "chunk_index", name="uq_chunks_entity_index"
        ),
        Index("ix_chunks_entity", "entity_type", "entity_id"),
        Index("ix_chunks_tenant_id", "tenant_id"),
    )
