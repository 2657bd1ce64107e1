"""Database engine and per-request session management."""
from __future__ import annotations

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from ..core.config import settings


def build_engine(url: str, *, ssl_required: bool = False) -> AsyncEngine:
    """Create an async engine for ``url``; TLS is requested only when the deployment asks for it."""

    return create_async_engine(
        url,
        echo=False,
        pool_pre_ping=True,
        connect_args={"ssl": True} if ssl_required else {},
    )


def make_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Rooms are returned to callers after commit, so keep their loaded attributes.
    return async_sessionmaker(bind, expire_on_commit=False, class_=AsyncSession)


engine = build_engine(settings.database_async_url, ssl_required=settings.database_ssl_required)
SessionLocal = make_session_factory(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session scoped to one request."""

    async with SessionLocal() as session:
        yield session


async def dispose_engine() -> None:
    """Release pooled connections on shutdown."""

    await engine.dispose()
