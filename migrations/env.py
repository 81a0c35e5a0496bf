"""Alembic environment, pointed at the application's models and settings."""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

import movie_catalog.models  # noqa: F401 - registers tables on Base.metadata
from movie_catalog.config import get_settings
from movie_catalog.database import Base

config = context.config
target_metadata = Base.metadata

if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def _sync_url(url: str) -> str:
    """Swap async drivers for their sync counterparts."""
    return url.replace("+aiosqlite", "").replace("+asyncpg", "+psycopg")


def _database_url() -> str:
    return config.get_main_option("sqlalchemy.url") or _sync_url(get_settings().database_url)


def run_migrations_offline() -> None:
    context.configure(
        url=_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = create_engine(_database_url(), poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=True,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
