"""
Hybrid search queries.

Keyword pass: PostgreSQL full-text search (to_tsvector / plainto_tsquery /
ts_rank). Notes index title, content and tag names; thoughts index content
and suggested tags. The ORDER BY applies the tag boost so the top ``limit``
rows are the ones that rank highest after boosting.

Vector pass: pgvector cosine distance over chunk embeddings, keeping only
the best chunk of each entity.

Both passes are scoped to owner, tenant and non-deleted rows. These
queries use PostgreSQL-only functions.

Dependencies: sqlalchemy, pgvector, hybrid_index.boundary.db.models
System role: Search read model over notes, thoughts, tags and chunks
"""

from typing import Any
from uuid import UUID

from sqlalchemy import ColumnElement, Float, and_, case, cast, exists, func, literal_column, select
from sqlalchemy.dialects.postgresql import REGCONFIG
from sqlalchemy.ext.asyncio import AsyncSession

from hybrid_index.boundary.db.models.chunk_model import ChunkModel
from hybrid_index.boundary.db.models.note_model import NoteModel
from hybrid_index.boundary.db.models.tag_model import NoteTagModel, TagModel
from hybrid_index.boundary.db.models.thought_model import ThoughtModel
from hybrid_index.models.entity import EntityType
from hybrid_index.models.search import KeywordHit, VectorHit


def _live_note_tags() -> ColumnElement[bool]:
    return and_(
        NoteTagModel.note_id == NoteModel.id,
        NoteTagModel.deleted_at.is_(None),
        TagModel.id == NoteTagModel.tag_id,
        TagModel.deleted_at.is_(None),
    )


def _note_tag_names() -> Any:
    return (
        select(func.array_agg(TagModel.name))
        .where(_live_note_tags())
        .correlate(NoteModel)
        .scalar_subquery()
    )


def _note_scope(owner_id: str, tenant_id: str, folder_id: UUID | None) -> list[ColumnElement[bool]]:
    criteria = [
        NoteModel.user_id == owner_id,
        NoteModel.tenant_id == tenant_id,
        NoteModel.deleted_at.is_(None),
    ]
    if folder_id is not None:
        criteria.append(NoteModel.folder_id == folder_id)
    return criteria


def _thought_scope(owner_id: str, tenant_id: str) -> list[ColumnElement[bool]]:
    return [
        ThoughtModel.user_id == owner_id,
        ThoughtModel.tenant_id == tenant_id,
        ThoughtModel.deleted_at.is_(None),
    ]


class SearchCRUD:
    """
    Keyword and vector search queries per entity type.

    Attributes:
        text_search_config: PostgreSQL text search configuration name
    """

    def __init__(self, text_search_config: str = "english") -> None:
        self.text_search_config = text_search_config

    def _regconfig(self) -> Any:
        return cast(self.text_search_config, REGCONFIG)

    async def keyword_search(
        self,
        session: AsyncSession,
        entity_type: EntityType,
        query: str,
        owner_id: str,
        tenant_id: str,
        limit: int,
        tag_boost: float,
        folder_id: UUID | None = None,
    ) -> list[KeywordHit]:
        """
        Full-text search over one entity type.

        Args:
            session: Async database session
            entity_type: NOTE or THOUGHT
            query: User query (parsed with plainto_tsquery)
            owner_id: Owner scope
            tenant_id: Tenant scope
            limit: Maximum hits
            tag_boost: Rank multiplier used for ordering tag matches
            folder_id: Optional note folder filter (ignored for thoughts)

        Returns:
            list[KeywordHit]: Hits with raw rank and tag_match flag
        """
        if entity_type == EntityType.NOTE:
            return await self._keyword_notes(
                session, query, owner_id, tenant_id, limit, tag_boost, folder_id
            )
        return await self._keyword_thoughts(
            session, query, owner_id, tenant_id, limit, tag_boost
        )

    async def _keyword_notes(
        self,
        session: AsyncSession,
        query: str,
        owner_id: str,
        tenant_id: str,
        limit: int,
        tag_boost: float,
        folder_id: UUID | None,
    ) -> list[KeywordHit]:
        tag_text = (
            select(func.string_agg(TagModel.name, literal_column("' '")))
            .where(_live_note_tags())
            .correlate(NoteModel)
            .scalar_subquery()
        )
        document = func.concat_ws(
            " ", NoteModel.title, NoteModel.content, func.coalesce(tag_text, "")
        )
        ts_vector = func.to_tsvector(self._regconfig(), document)
        ts_query = func.plainto_tsquery(self._regconfig(), query)
        rank = cast(func.ts_rank(ts_vector, ts_query), Float)
        tag_match = (
            exists()
            .where(_live_note_tags(), func.lower(TagModel.name) == func.lower(query))
            .correlate(NoteModel)
        )

        stmt = (
            select(
                NoteModel,
                rank.label("rank"),
                tag_match.label("tag_match"),
                _note_tag_names().label("tags"),
            )
            .where(ts_vector.op("@@")(ts_query), *_note_scope(owner_id, tenant_id, folder_id))
            .order_by((rank * case((tag_match, tag_boost), else_=1.0)).desc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return [
            KeywordHit(
                **_note_fields(note, tags),
                rank=rank_value or 0.0,
                tag_match=bool(matched),
            )
            for note, rank_value, matched, tags in result.all()
        ]

    async def _keyword_thoughts(
        self,
        session: AsyncSession,
        query: str,
        owner_id: str,
        tenant_id: str,
        limit: int,
        tag_boost: float,
    ) -> list[KeywordHit]:
        document = func.concat_ws(
            " ",
            ThoughtModel.content,
            func.array_to_string(ThoughtModel.suggested_tags, " "),
        )
        ts_vector = func.to_tsvector(self._regconfig(), document)
        ts_query = func.plainto_tsquery(self._regconfig(), query)
        rank = cast(func.ts_rank(ts_vector, ts_query), Float)
        tag = func.unnest(ThoughtModel.suggested_tags).table_valued("name").render_derived()
        tag_match = (
            exists()
            .select_from(tag)
            .where(func.lower(tag.c.name) == func.lower(query))
            .correlate(ThoughtModel)
        )

        stmt = (
            select(ThoughtModel, rank.label("rank"), tag_match.label("tag_match"))
            .where(ts_vector.op("@@")(ts_query), *_thought_scope(owner_id, tenant_id))
            .order_by((rank * case((tag_match, tag_boost), else_=1.0)).desc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return [
            KeywordHit(
                **_thought_fields(thought),
                rank=rank_value or 0.0,
                tag_match=bool(matched),
            )
            for thought, rank_value, matched in result.all()
        ]

    async def vector_search(
        self,
        session: AsyncSession,
        entity_type: EntityType,
        query_vector: list[float],
        owner_id: str,
        tenant_id: str,
        limit: int,
        folder_id: UUID | None = None,
    ) -> list[VectorHit]:
        """
        Best-chunk cosine similarity search over one entity type.

        Chunks without an embedding are never matched.

        Args:
            session: Async database session
            entity_type: NOTE or THOUGHT
            query_vector: Query embedding
            owner_id: Owner scope
            tenant_id: Tenant scope
            limit: Maximum hits
            folder_id: Optional note folder filter (ignored for thoughts)

        Returns:
            list[VectorHit]: One hit per entity, most similar first
        """
        distance = ChunkModel.embedding.cosine_distance(query_vector)
        ranked = (
            select(
                ChunkModel.entity_id,
                ChunkModel.chunk_index,
                ChunkModel.content.label("chunk_content"),
                (1 - distance).label("similarity"),
                func.row_number()
                .over(partition_by=ChunkModel.entity_id, order_by=distance)
                .label("position"),
            )
            .where(
                ChunkModel.entity_type == entity_type,
                ChunkModel.tenant_id == tenant_id,
                ChunkModel.embedding.is_not(None),
            )
            .subquery()
        )

        if entity_type == EntityType.NOTE:
            stmt = (
                select(
                    NoteModel,
                    ranked.c.similarity,
                    ranked.c.chunk_index,
                    ranked.c.chunk_content,
                    _note_tag_names().label("tags"),
                )
                .join(ranked, ranked.c.entity_id == NoteModel.id)
                .where(ranked.c.position == 1, *_note_scope(owner_id, tenant_id, folder_id))
            )
        else:
            stmt = (
                select(
                    ThoughtModel,
                    ranked.c.similarity,
                    ranked.c.chunk_index,
                    ranked.c.chunk_content,
                )
                .join(ranked, ranked.c.entity_id == ThoughtModel.id)
                .where(ranked.c.position == 1, *_thought_scope(owner_id, tenant_id))
            )
        stmt = stmt.order_by(ranked.c.similarity.desc()).limit(limit)

        result = await session.execute(stmt)
        hits = []
        for row in result.all():
            if entity_type == EntityType.NOTE:
                fields = _note_fields(row[0], row.tags)
            else:
                fields = _thought_fields(row[0])
            hits.append(
                VectorHit(
                    **fields,
                    similarity=float(row.similarity),
                    chunk_index=row.chunk_index,
                    chunk_content=row.chunk_content,
                )
            )
        return hits


def _note_fields(note: NoteModel, tags: list[str] | None) -> dict[str, Any]:
    return {
        "entity_type": EntityType.NOTE,
        "entity_id": note.id,
        "title": note.title,
        "content": note.content,
        "folder_id": note.folder_id,
        "tags": list(tags or []),
        "created_at": note.created_at,
        "updated_at": note.updated_at,
    }


def _thought_fields(thought: ThoughtModel) -> dict[str, Any]:
    return {
        "entity_type": EntityType.THOUGHT,
        "entity_id": thought.id,
        "title": None,
        "content": thought.content,
        "folder_id": None,
        "tags": list(thought.suggested_tags or []),
        "created_at": thought.created_at,
        "updated_at": thought.updated_at,
    }
