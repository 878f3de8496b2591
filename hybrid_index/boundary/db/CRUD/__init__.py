"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from hybrid_index.boundary.db.CRUD import chunk_crud, embedding_job_crud

    # Use singleton instances
    chunks = await chunk_crud.list_for_entity(db, EntityType.NOTE, note_id)

    # Search queries need the text search configuration
    from hybrid_index.boundary.db.CRUD import SearchCRUD
    search = SearchCRUD(text_search_config="english")
"""

from hybrid_index.boundary.db.CRUD.base_crud import BaseCRUD
from hybrid_index.boundary.db.CRUD.chunk_crud import ChunkCRUD, chunk_crud
from hybrid_index.boundary.db.CRUD.embedding_job_crud import EmbeddingJobCRUD, embedding_job_crud
from hybrid_index.boundary.db.CRUD.note_crud import NoteCRUD, note_crud
from hybrid_index.boundary.db.CRUD.search_crud import SearchCRUD

__all__ = [
    "BaseCRUD",
    "ChunkCRUD",
    "chunk_crud",
    "EmbeddingJobCRUD",
    "embedding_job_crud",
    "NoteCRUD",
    "note_crud",
    "SearchCRUD",
]
