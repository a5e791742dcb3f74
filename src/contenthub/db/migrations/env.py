"""Alembic environment.

Learn: Migrations connect with the same CONTENTHUB_DATABASE_URL as the API
(read through Settings, never from alembic.ini), so `alembic upgrade head`
and the server always agree on the target database. Base.metadata is what
`alembic revision --autogenerate` diffs against the live schema.

Run from the repository root:
    alembic upgrade head
    alembic upgrade head --sql     # print the DDL instead of executing it
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

from contenthub.config import settings
from contenthub.db.models import Base

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _configure(**kwargs) -> None:
    context.configure(target_metadata=target_metadata, compare_type=True, **kwargs)


def run_offline() -> None:
    _configure(
        url=settings.database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_sync(connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_online() -> None:
    # One short-lived connection; no pool needed for a migration run.
    engine = create_async_engine(settings.database_url, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_run_sync)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_offline()
else:
    asyncio.run(run_online())
