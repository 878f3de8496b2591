"""
Database configuration settings.

Connection and pool parameters for the async store that holds notes,
thoughts, chunks and the embedding job queue. Only the asyncpg driver
is used; every caller goes through the async engine.

Dependencies: pydantic, pydantic_settings, sqlalchemy
System role: Store connection configuration for the ORM
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict
from sqlalchemy.engine import URL

from hybrid_index.configs.base import BaseSettings


class DatabaseSettings(BaseSettings):
    """PostgreSQL (pgvector) store configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="POSTGRES_",
        case_sensitive=False,
        extra="ignore",
    )

    url: str | None = Field(
        default=None,
        description="Full async URL; overrides the individual connection fields",
    )
    host: str = Field(default="localhost", description="PostgreSQL host")
    port: int = Field(default=5432, description="PostgreSQL port")
    user: str = Field(default="postgres", description="PostgreSQL user")
    password: str = Field(default="postgres", description="PostgreSQL password")
    db: str = Field(default="hybrid_index", description="PostgreSQL database name")
    sslmode: str = Field(default="disable", description="'require' enables TLS")

    pool_size: int = Field(default=10, description="Connection pool size")
    max_overflow: int = Field(default=20, description="Maximum overflow connections")
    pool_timeout: int = Field(default=30, description="Connection pool timeout in seconds")
    pool_recycle_seconds: int = Field(
        default=1800,
        description="Recycle pooled connections older than this (worker processes are long-lived)",
    )
    echo_sql: bool = Field(default=False, description="Echo SQL statements to logs")

    @property
    def async_database_url(self) -> str:
        """
        Async connection URL for create_async_engine.

        Credentials are URL-escaped; asyncpg takes ``ssl`` rather than
        libpq's ``sslmode``.

        Returns:
            str: postgresql+asyncpg URL
        """
        if self.url:
            return self.url

        query = {"ssl": "require"} if self.sslmode == "require" else {}
        return URL.create(
            "postgresql+asyncpg",
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.db,
            query=query,
        ).render_as_string(hide_password=False)
