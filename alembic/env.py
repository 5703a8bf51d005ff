"""Migration Runner — applies the members and notifications schema.

Invariants:
    - The target URL is Settings.database_url, so migrations and the app
      always agree on the database (postgresql:// is already rewritten
      to postgresql+asyncpg:// by the settings validator)
    - target_metadata covers every table the stores query

Design Decisions:
    - Online mode runs through an AsyncEngine with NullPool; one
      connection per migration run
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context

from community_rest.config import get_settings
from community_rest.db.base import Base
from community_rest.models.member import Member
from community_rest.models.notification import Notification

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata
MANAGED_TABLES = (Member.__tablename__, Notification.__tablename__)


def _include_object(obj, name, type_, reflected, compare_to) -> bool:
    if type_ == "table":
        return name in MANAGED_TABLES
    return True


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        include_object=_include_object,
        compare_type=True,
        **kwargs,
    )


def run_offline(url: str) -> None:
    """Emit SQL to stdout instead of connecting."""
    _configure(
        url=url, literal_binds=True, dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _migrate(connection: Connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_online(url: str) -> None:
    engine = create_async_engine(url, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_migrate)
    finally:
        await engine.dispose()


database_url = get_settings().database_url
if context.is_offline_mode():
    run_offline(database_url)
else:
    asyncio.run(run_online(database_url))
