"""
Chunk CRUD operations.

Dependencies: sqlalchemy, hybrid_index.boundary.db.models
System role: Chunk persistence for the orchestrator and embedding worker
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hybrid_index.boundary.db.CRUD.base_crud import BaseCRUD
from hybrid_index.boundary.db.models.chunk_model import ChunkModel
from hybrid_index.core.exceptions import StaleWriteError
from hybrid_index.models.entity import EntityType


class ChunkCRUD(BaseCRUD[ChunkModel]):
    """CRUD operations for ChunkModel."""

    def __init__(self) -> None:
        """Initialize ChunkCRUD with ChunkModel."""
        super().__init__(ChunkModel)

    async def delete_for_entity(
        self,
        session: AsyncSession,
        entity_type: EntityType,
        entity_id: UUID,
    ) -> int:
        """
        Delete every chunk of a document.

        Returns:
            Number of chunks deleted
        """
        stmt = delete(ChunkModel).where(
            ChunkModel.entity_type == entity_type,
            ChunkModel.entity_id == entity_id,
        )
        result = await session.execute(stmt)
        return result.rowcount

    async def create_for_entity(
        self,
        session: AsyncSession,
        entity_type: EntityType,
        entity_id: UUID,
        tenant_id: str,
        contents: Sequence[str],
    ) -> list[ChunkModel]:
        """
        Insert one chunk per segment, indexed by position.

        Args:
            session: Async database session
            entity_type: NOTE or THOUGHT
            entity_id: Owning document id
            tenant_id: Tenant scope
            contents: Segment texts in document order

        Returns:
            Created chunks (ids assigned, embeddings NULL)
        """
        chunks = [
            ChunkModel(
                entity_type=entity_type,
                entity_id=entity_id,
                tenant_id=tenant_id,
                chunk_index=index,
                content=content,
            )
            for index, content in enumerate(contents)
        ]
        session.add_all(chunks)
        await session.flush()
        return chunks

    async def list_for_entity(
        self,
        session: AsyncSession,
        entity_type: EntityType,
        entity_id: UUID,
    ) -> Sequence[ChunkModel]:
        """Chunks of a document ordered by chunk_index."""
        stmt = (
            select(ChunkModel)
            .where(
                ChunkModel.entity_type == entity_type,
                ChunkModel.entity_id == entity_id,
            )
            .order_by(ChunkModel.chunk_index)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def set_embedding(
        self,
        session: AsyncSession,
        chunk_id: UUID,
        embedding: list[float],
    ) -> None:
        """
        Write the embedding of a chunk.

        Raises:
            StaleWriteError: The chunk no longer exists (replaced by a re-index)
        """
        stmt = (
            update(ChunkModel)
            .where(ChunkModel.id == chunk_id)
            .values(embedding=embedding)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        if result.rowcount == 0:
            raise StaleWriteError(
                "Chunk was removed before its embedding was written",
                chunk_id=str(chunk_id),
            )


chunk_crud = ChunkCRUD()
