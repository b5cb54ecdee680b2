"""Factories de clientes externos — engine SQLAlchemy async (asyncpg)."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from config.settings import get_database_settings

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────────────────
# PostgreSQL Engine Factories
# ──────────────────────────────────────────────────────────────────────────────


@lru_cache(maxsize=1)
def create_db_engine() -> AsyncEngine:
    """Cria engine async do PostgreSQL (singleton).

    pool_pre_ping descarta conexões quebradas antes do uso.

    Returns:
        AsyncEngine configurado com DB_* da env
    """
    settings = get_database_settings()
    engine = create_async_engine(
        settings.async_url,
        echo=settings.echo_sql,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        pool_timeout=settings.pool_timeout_seconds,
        pool_pre_ping=True,
        connect_args=settings.connect_args,
    )
    logger.info(
        "db_engine_created",
        extra={"host": settings.host, "database": settings.name, "ssl": settings.ssl},
    )
    return engine


@lru_cache(maxsize=1)
def create_db_session_factory() -> async_sessionmaker[AsyncSession]:
    """Cria factory de sessões async ligada ao engine (singleton)."""
    return async_sessionmaker(
        bind=create_db_engine(),
        autoflush=False,
        expire_on_commit=False,
    )


async def dispose_db_engine() -> None:
    """Fecha o pool do engine, se criado."""
    if create_db_engine.cache_info().currsize == 0:
        return
    await create_db_engine().dispose()
    create_db_session_factory.cache_clear()
    create_db_engine.cache_clear()
    logger.info("db_engine_disposed")
