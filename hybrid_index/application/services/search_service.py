"""
Hybrid search service.

Runs the keyword and vector passes for each requested entity type and
merges them into one ranked list. The embedding provider is optional at
query time: if it fails, results are scored on keywords alone.

Dependencies: hybrid_index.core.search, hybrid_index.boundary
System role: Hybrid search orchestration
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hybrid_index.boundary.db.CRUD.search_crud import SearchCRUD
from hybrid_index.boundary.embeddings.provider import EmbeddingProvider
from hybrid_index.configs import get_settings
from hybrid_index.configs.search import SearchSettings
from hybrid_index.core.exceptions import ProviderError, StoreError, ValidationError
from hybrid_index.core.search import merge_entity_results, rank_results, validate_weights
from hybrid_index.models.search import SearchOptions, SearchResponse, SearchResult

logger = logging.getLogger(__name__)


class SearchService:
    """
    Hybrid search orchestrator.

    Combines full-text rank and embedding similarity per entity, scoped to
    one owner and tenant.
    """

    def __init__(
        self,
        db: AsyncSession,
        provider: EmbeddingProvider | None = None,
        repository: SearchCRUD | None = None,
        settings: SearchSettings | None = None,
    ) -> None:
        """
        Initialize search service.

        Args:
            db: AsyncSession for search queries
            provider: Optional EmbeddingProvider (created lazily if None)
            repository: Optional SearchCRUD (created from settings if None)
            settings: Optional search settings (application settings if None)
        """
        self.db = db
        self.settings = settings or get_settings().search
        self._provider = provider
        self.repository = repository or SearchCRUD(self.settings.text_search_config)

    @property
    def provider(self) -> EmbeddingProvider:
        """Lazy-load provider to avoid initialization cost."""
        if self._provider is None:
            self._provider = EmbeddingProvider()
        return self._provider

    def default_options(self) -> SearchOptions:
        """Options built from configured defaults."""
        return SearchOptions(
            limit=self.settings.default_limit,
            keyword_weight=self.settings.keyword_weight,
            vector_weight=self.settings.vector_weight,
        )

    async def search(
        self,
        query: str,
        owner_id: str,
        tenant_id: str,
        options: SearchOptions | None = None,
    ) -> SearchResponse:
        """
        Search notes and thoughts.

        Steps:
        1. Validate query and weights
        2. Embed the query (failure -> keyword-only search)
        3. Keyword and vector passes per entity type, merged by entity id
        4. Concatenate, sort by combined score, truncate to limit

        Args:
            query: Search text
            owner_id: Owner scope
            tenant_id: Tenant scope
            options: Limit, weights, entity types and folder filter

        Returns:
            SearchResponse: Ranked results with the weights used

        Raises:
            ValidationError: Blank query or weights not summing to 1.0
            StoreError: A search query failed
        """
        options = options or self.default_options()
        if not query or not query.strip():
            raise ValidationError("Search query must not be empty", field="query")
        weights = options.weights
        validate_weights(weights, self.settings.weight_tolerance)
        query = query.strip()

        query_vector: list[float] | None = None
        try:
            query_vector = await self.provider.embed(query)
        except ProviderError as e:
            logger.warning(
                f"{__name__}:search - Embedding unavailable, using keyword search only: {e}"
            )

        groups: list[list[SearchResult]] = []
        try:
            for entity_type in options.entity_types():
                keyword_hits = await self.repository.keyword_search(
                    self.db,
                    entity_type,
                    query,
                    owner_id,
                    tenant_id,
                    limit=options.limit,
                    tag_boost=self.settings.tag_boost,
                    folder_id=options.folder_id,
                )
                vector_hits = []
                if query_vector is not None:
                    vector_hits = await self.repository.vector_search(
                        self.db,
                        entity_type,
                        query_vector,
                        owner_id,
                        tenant_id,
                        limit=options.limit,
                        folder_id=options.folder_id,
                    )
                groups.append(
                    merge_entity_results(
                        keyword_hits,
                        vector_hits,
                        weights,
                        options.limit,
                        tag_boost=self.settings.tag_boost,
                    )
                )
        except SQLAlchemyError as e:
            raise StoreError(f"Search query failed: {e}", operation="search") from e

        results = rank_results(groups, options.limit)
        logger.info(
            f"{__name__}:search - {len(results)} results "
            f"(vector={'on' if query_vector is not None else 'off'})"
        )
        return SearchResponse(
            query=query,
            results=results,
            count=len(results),
            weights=weights,
            has_vector_search=query_vector is not None,
        )
