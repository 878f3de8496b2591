"""
Tag and note-tag association ORM models.

Taxonomy owned by the tags CRUD layer. Search aggregates tag names into
the note's full-text document and boosts exact tag-name queries.

Dependencies: sqlalchemy, hybrid_index.boundary.db.base
System role: Keyword search taxonomy
"""

import uuid

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from hybrid_index.boundary.db.base import Base, SoftDeleteMixin, TimestampMixin, UUIDMixin


class TagModel(Base, UUIDMixin, TimestampMixin, SoftDeleteMixin):
    """
    Tag ORM model.

    Attributes:
        user_id: Owner identifier
        tenant_id: Tenant scope
        name: Display name matched case-insensitively against queries
        color: Optional display color
    """

    __tablename__ = "tags"

    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    tenant_id: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    color: Mapped[str | None] = mapped_column(String(20), nullable=True, default=None)


class NoteTagModel(Base, UUIDMixin, TimestampMixin, SoftDeleteMixin):
    """
    Note-to-tag association.

    Attributes:
        note_id: Tagged note
        tag_id: Applied tag
    """

    __tablename__ = "note_tags"

    note_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("notes.id", ondelete="CASCADE"),
        nullable=False,
    )
    tag_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("tags.id", ondelete="CASCADE"),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("note_id", "tag_id", name="uq_note_tags_note_tag"),
        Index("ix_note_tags_tag_id", "tag_id"),
    )
