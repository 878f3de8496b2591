"""
Note CRUD operations used by the indexing core.

Notes are written by the notes collaborator; the core only finds notes
whose index is out of date and stamps them once re-indexed.

Dependencies: sqlalchemy, hybrid_index.boundary.db.models
System role: Note reads for the stale-note sweep
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hybrid_index.boundary.db.CRUD.base_crud import BaseCRUD
from hybrid_index.boundary.db.models.note_model import NoteModel


class NoteCRUD(BaseCRUD[NoteModel]):
    """CRUD operations for NoteModel."""

    def __init__(self) -> None:
        """Initialize NoteCRUD with NoteModel."""
        super().__init__(NoteModel)

    async def get_stale_notes(
        self,
        session: AsyncSession,
        updated_before: datetime,
        limit: int,
    ) -> Sequence[NoteModel]:
        """
        Live notes edited since they were last indexed.

        Only notes whose last edit is older than ``updated_before`` are
        returned, so a note still being typed into is left alone.

        Args:
            session: Async database session
            updated_before: Cooldown cutoff
            limit: Maximum notes returned, oldest edit first

        Returns:
            Sequence of NoteModels
        """
        stmt = (
            select(NoteModel)
            .where(
                NoteModel.deleted_at.is_(None),
                NoteModel.updated_at < updated_before,
                or_(
                    NoteModel.last_indexed_at.is_(None),
                    NoteModel.last_indexed_at < NoteModel.updated_at,
                ),
            )
            .order_by(NoteModel.updated_at)
            .limit(limit)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def mark_indexed(
        self,
        session: AsyncSession,
        id: UUID,
        indexed_at: datetime,
    ) -> bool:
        """
        Stamp last_indexed_at without touching updated_at.

        Returns:
            True if the note exists
        """
        stmt = (
            update(NoteModel)
            .where(NoteModel.id == id)
            .values(last_indexed_at=indexed_at, updated_at=NoteModel.updated_at)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount > 0


note_crud = NoteCRUD()
