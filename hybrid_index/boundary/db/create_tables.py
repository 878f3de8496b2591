"""
Database table creation script.

Creates all tables defined in ORM models using SQLAlchemy metadata, after
enabling the pgvector extension.

Dependencies: sqlalchemy, hybrid_index.configs
System role: Database schema initialization

Usage:
    python -m hybrid_index.boundary.db.create_tables
"""

import asyncio
import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from hybrid_index.boundary.db.base import Base
from hybrid_index.boundary.db.connection import get_async_engine
from hybrid_index.observability.logger import configure_logging

# Import all models to register them with Base.metadata
from hybrid_index.boundary.db import models  # noqa: F401

logger = logging.getLogger(__name__)


async def create_all_tables(engine: AsyncEngine | None = None) -> None:
    """
    Create all database tables from registered ORM models.

    Idempotent: CREATE EXTENSION IF NOT EXISTS plus CREATE TABLE IF NOT
    EXISTS for each model, so safe to run multiple times.

    Args:
        engine: Engine to use (application engine if None)

    Raises:
        SQLAlchemyError: If database connection fails or table creation fails
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        if conn.dialect.name == "postgresql":
            await conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"{__name__}:create_all_tables - All tables created successfully")


if __name__ == "__main__":
    configure_logging()
    asyncio.run(create_all_tables())
