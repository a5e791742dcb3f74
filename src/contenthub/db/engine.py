"""Async SQLAlchemy engine and per-request sessions.

Learn: One pooled AsyncEngine per process (asyncpg underneath). Routes get
an AsyncSession through the get_db dependency; services commit explicitly,
and anything left uncommitted when a request fails is rolled back here.
"""

from collections.abc import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from contenthub.config import Settings, settings


def build_engine(app_settings: Settings) -> AsyncEngine:
    """Pool sized for a single API worker; pre-ping drops dead connections."""
    return create_async_engine(
        app_settings.database_url,
        echo=app_settings.debug,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
    )


engine = build_engine(settings)

# expire_on_commit=False: returned ORM objects stay readable after commit,
# which response serialization relies on.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency: one session per request."""
    async with async_session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
