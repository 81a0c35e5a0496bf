"""Tests for the catalog, wish list and new release stores."""

from datetime import UTC, date, datetime

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from movie_catalog.models.movie import Movie
from movie_catalog.models.release import NewRelease
from movie_catalog.schemas.movie import MovieReference
from movie_catalog.services.registry import MovieRegistry
from movie_catalog.services.result import Err, ErrorCode, Ok
from movie_catalog.services.stores import CatalogStore, NewReleaseStore, WishListStore
from movie_catalog.utils.security import AuthContext

FIGHT_CLUB = MovieReference(
    tmdb_id=550,
    imdb_id="tt0137523",
    title="Fight Club",
    poster="https://image.tmdb.org/t/p/w342/poster.jpg",
    release_date=date(1999, 10, 15),
)


@pytest.fixture
async def movie(session_factory: async_sessionmaker[AsyncSession]) -> Movie:
    async with session_factory() as session:
        created = await MovieRegistry(session).find_or_create(FIGHT_CLUB)
        await session.commit()
        return created.value


async def drop_table(engine: AsyncEngine, name: str) -> None:
    """Make every statement against ``name`` fail with a database error."""
    async with engine.begin() as conn:
        await conn.execute(text(f"DROP TABLE {name}"))


class TestInsert:
    @pytest.mark.parametrize(
        ("store_class", "code"),
        [
            (CatalogStore, ErrorCode.ALREADY_CATALOGED),
            (WishListStore, ErrorCode.ALREADY_WISHED),
        ],
    )
    async def test_existing_row_is_a_duplicate(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        db_session: AsyncSession,
        auth: AuthContext,
        movie: Movie,
        store_class: type[CatalogStore] | type[WishListStore],
        code: ErrorCode,
    ) -> None:
        async with session_factory() as other:
            first = await store_class(other).insert(auth.user_id, movie.id)
            await other.commit()
        assert isinstance(first, Ok)

        result = await store_class(db_session).insert(auth.user_id, movie.id)

        assert isinstance(result, Err)
        assert result.code is code

    async def test_unknown_movie_is_not_a_duplicate(
        self, db_session: AsyncSession, auth: AuthContext
    ) -> None:
        result = await CatalogStore(db_session).insert(auth.user_id, 424242)

        assert isinstance(result, Err)
        assert result.code is ErrorCode.INSERT_FAILED
        assert await CatalogStore(db_session).exists(auth.user_id, 424242) == Ok(False)

    async def test_copies_check_constraint(
        self, db_session: AsyncSession, auth: AuthContext, movie: Movie
    ) -> None:
        result = await CatalogStore(db_session).insert(auth.user_id, movie.id, copies=0)

        assert isinstance(result, Err)
        assert result.code is ErrorCode.INSERT_FAILED


class TestDatabaseFailures:
    """Store operations report database errors as values instead of raising."""

    async def test_catalog_operations(self, engine: AsyncEngine, db_session: AsyncSession) -> None:
        await drop_table(engine, "catalog")
        store = CatalogStore(db_session)

        assert (await store.exists(1, 1)).code is ErrorCode.LOOKUP_FAILED
        assert (await store.list_by_user(1)).code is ErrorCode.LOOKUP_FAILED
        assert (await store.insert(1, 1)).code is ErrorCode.INSERT_FAILED
        assert (await store.update(1, 1, copies=2)).code is ErrorCode.UPDATE_FAILED
        assert (await store.delete(1, 1)).code is ErrorCode.DELETE_FAILED

    async def test_wish_list_operations(
        self, engine: AsyncEngine, db_session: AsyncSession
    ) -> None:
        await drop_table(engine, "wish_list")
        store = WishListStore(db_session)

        assert (await store.exists(1, 1)).code is ErrorCode.LOOKUP_FAILED
        assert (await store.insert(1, 1)).code is ErrorCode.INSERT_FAILED
        assert (await store.delete(1, 1)).code is ErrorCode.DELETE_FAILED
        assert (await store.delete_all_for_user(1)).code is ErrorCode.DELETE_FAILED

    async def test_new_release_operations(
        self, engine: AsyncEngine, db_session: AsyncSession
    ) -> None:
        await drop_table(engine, "new_releases")
        store = NewReleaseStore(db_session)
        release = NewRelease(
            imdb_id="tt0000001",
            tmdb_id=101,
            title="Alpha Run",
            release_week="Tuesday January 7, 2025",
            position=0,
            ingested_at=datetime.now(UTC),
        )

        assert (await store.all()).code is ErrorCode.LOOKUP_FAILED
        assert (await store.clear_all()).code is ErrorCode.TRUNCATE_FAILED
        assert (await store.insert(release)).code is ErrorCode.INSERT_FAILED
