from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from collateral_reader.app.config import settings


def create_app_async_engine(*, url: str | None = None, echo: bool = False) -> AsyncEngine:
    """
    AsyncEngine backing the sqlalchemy cache store.

    `url` overrides DATABASE_URL (tests point it at aiosqlite).
    """
    database_url = url or settings.database_url
    if not database_url:
        raise ValueError("DATABASE_URL (or POSTGRES_*) must be set for the sqlalchemy cache backend")

    return create_async_engine(
        database_url,  # postgresql+asyncpg://...
        echo=echo,
        pool_pre_ping=True,
    )
