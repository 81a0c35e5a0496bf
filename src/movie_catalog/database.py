"""Database configuration with async SQLAlchemy support."""

from collections.abc import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from movie_catalog.config import get_settings


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def configure_sqlite(engine: AsyncEngine) -> None:
    """Make SQLite honour savepoints and foreign key cascades.

    The sqlite3 driver defers BEGIN until the first DML statement, which breaks
    SAVEPOINT handling. Autocommit is disabled at the driver level and BEGIN is
    emitted explicitly instead.
    """
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, _connection_record) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn) -> None:
        conn.exec_driver_sql("BEGIN")


settings = get_settings()

# Create async engine
engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
)
configure_sqlite(engine)

# Create async session factory
async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession]:
    """Dependency that provides an async database session.

    Yields a session and ensures it's closed after the request.
    """
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
