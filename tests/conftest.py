"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory async database, session factory, fake embedding
providers, sample identifiers
Dependencies: pytest, sqlalchemy, aiosqlite, langchain_core
System role: Test infrastructure and fixture management
"""

import uuid

import pytest
from langchain_core.embeddings import DeterministicFakeEmbedding

from hybrid_index.configs.embedding import EmbeddingSettings
from hybrid_index.configs.indexing import IndexingSettings

EMBEDDING_DIMENSIONS = 8


@pytest.fixture
async def test_engine():
    """
    Create in-memory SQLite async engine with all tables.

    Yields:
        AsyncEngine: Engine shared by every session of one test
    """
    from sqlalchemy.ext.asyncio import create_async_engine
    from sqlalchemy.pool import StaticPool
    from hybrid_index.boundary.db.base import Base
    from hybrid_index.boundary.db import models  # noqa: F401

    # Use SQLite in-memory database for tests
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Cleanup
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    """
    Create session factory bound to the test engine.

    Returns:
        async_sessionmaker: Factory for independent sessions (workers, background tasks)
    """
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def test_async_db(session_factory):
    """
    Create session on the in-memory SQLite database.

    Yields:
        AsyncSession: Test database session with cleanup
    """
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def indexing_settings() -> IndexingSettings:
    """Provide indexing settings with default chunking and queue policy."""
    return IndexingSettings()


@pytest.fixture
def embedding_settings() -> EmbeddingSettings:
    """Provide embedding settings sized for the fake embeddings."""
    return EmbeddingSettings(
        model="fake-embedding",
        dimensions=EMBEDDING_DIMENSIONS,
        timeout_seconds=1.0,
    )


@pytest.fixture
def fake_embeddings() -> DeterministicFakeEmbedding:
    """Provide deterministic LangChain fake embeddings."""
    return DeterministicFakeEmbedding(size=EMBEDDING_DIMENSIONS)


@pytest.fixture
def owner_id() -> str:
    """Provide sample owner identifier."""
    return "user_123"


@pytest.fixture
def tenant_id() -> str:
    """Provide sample tenant identifier."""
    return "tenant_abc"


@pytest.fixture
def entity_id() -> uuid.UUID:
    """Provide sample document UUID."""
    return uuid.uuid4()


@pytest.fixture
def long_text() -> str:
    """Provide text long enough to produce several chunks."""
    return " ".join(f"This is sentence number {i} about indexing." for i in range(200))
