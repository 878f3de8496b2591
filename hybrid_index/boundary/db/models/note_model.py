"""
Note ORM model.

Notes are owned and written by the notes CRUD layer. The indexing core
reads them for search and the stale-note sweep, and stamps
last_indexed_at after rebuilding a note's chunks.

Dependencies: sqlalchemy, hybrid_index.boundary.db.base
System role: Source document for indexing and search
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from hybrid_index.boundary.db.base import Base, SoftDeleteMixin, TimestampMixin, UUIDMixin


class NoteModel(Base, UUIDMixin, TimestampMixin, SoftDeleteMixin):
    """
    Note ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        user_id: Owner identifier from the auth layer
        tenant_id: Tenant scope
        folder_id: Optional folder used as a search filter
        title: Note title (indexed together with the body)
        content: Plain text or HTML body
        content_state: Serialized rich editor state; preferred over content
        last_indexed_at: When chunks were last rebuilt; NULL if never
        deleted_at: Soft-delete marker; deleted notes are never searched
    """

    __tablename__ = "notes"

    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    tenant_id: Mapped[str] = mapped_column(String(255), nullable=False)
    folder_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        nullable=True,
        default=None,
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    content_state: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    last_indexed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
        doc="Revision marker compared against updated_at by the stale sweep",
    )

    __table_args__ = (
        Index("ix_notes_owner", "user_id", "tenant_id"),
        Index("ix_notes_updated_at", "updated_at"),
    )
