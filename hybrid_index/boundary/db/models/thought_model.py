"""
Thought ORM model.

Short captured thoughts with AI-suggested tags. Owned by the thoughts CRUD
layer; read-only for the indexing core.

Dependencies: sqlalchemy, hybrid_index.boundary.db.base
System role: Source document for indexing and search
"""

from sqlalchemy import JSON, Index, String, Text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from hybrid_index.boundary.db.base import Base, SoftDeleteMixin, TimestampMixin, UUIDMixin


class ThoughtModel(Base, UUIDMixin, TimestampMixin, SoftDeleteMixin):
    """
    Thought ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        user_id: Owner identifier from the auth layer
        tenant_id: Tenant scope
        content: Plain text or HTML body
        suggested_tags: Tag names; an exact query match boosts keyword rank
        deleted_at: Soft-delete marker
    """

    __tablename__ = "thoughts"

    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    tenant_id: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    suggested_tags: Mapped[list[str]] = mapped_column(
        ARRAY(String(100)).with_variant(JSON(), "sqlite"),
        nullable=False,
        default=list,
    )

    __table_args__ = (Index("ix_thoughts_owner", "user_id", "tenant_id"),)
