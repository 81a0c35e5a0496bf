"""Persistence operations for catalog, wish list and new release rows.

Every operation returns ``Ok`` or ``Err``; database exceptions are logged here and
never leave this module. Nothing is retried.
"""

import logging
from collections.abc import Sequence
from datetime import UTC, datetime

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager

from movie_catalog.models.collection import CatalogEntry, WishListEntry
from movie_catalog.models.movie import Movie
from movie_catalog.models.release import NewRelease
from movie_catalog.services.result import Err, ErrorCode, Ok

logger = logging.getLogger(__name__)


class _UserMovieStore:
    """Rows keyed by (user, movie)."""

    model: type[CatalogEntry] | type[WishListEntry]
    label: str
    duplicate_code: ErrorCode

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _match(self, user_id: int, movie_id: int):
        return (self.model.user_id == user_id) & (self.model.movie_id == movie_id)

    async def exists(self, user_id: int, movie_id: int) -> Ok[bool] | Err:
        try:
            result = await self.session.execute(
                select(self.model.movie_id).where(self._match(user_id, movie_id))
            )
        except SQLAlchemyError:
            logger.exception("%s lookup failed for user=%s movie=%s", self.label, user_id, movie_id)
            return Err(ErrorCode.LOOKUP_FAILED, f"Could not check the {self.label} for a match.")
        return Ok(result.first() is not None)

    async def _insert(self, entry: CatalogEntry | WishListEntry) -> Ok | Err:
        try:
            async with self.session.begin_nested():
                self.session.add(entry)
                await self.session.flush()
        except IntegrityError:
            # Only a row already holding the key is a duplicate; foreign key and
            # check constraint violations are plain failures.
            present = await self.exists(entry.user_id, entry.movie_id)
            if isinstance(present, Ok) and present.value:
                return Err(self.duplicate_code, f"Movie is already in the user's {self.label}.")
            logger.exception(
                "%s insert rejected for user=%s movie=%s", self.label, entry.user_id, entry.movie_id
            )
            return Err(ErrorCode.INSERT_FAILED, f"Could not add the movie to the {self.label}.")
        except SQLAlchemyError:
            logger.exception(
                "%s insert failed for user=%s movie=%s", self.label, entry.user_id, entry.movie_id
            )
            return Err(ErrorCode.INSERT_FAILED, f"Could not add the movie to the {self.label}.")
        return Ok(entry)

    async def delete(self, user_id: int, movie_id: int) -> Ok[int] | Err:
        """Delete the entry, returning how many rows were removed."""
        try:
            async with self.session.begin_nested():
                result = await self.session.execute(
                    delete(self.model).where(self._match(user_id, movie_id))
                )
        except SQLAlchemyError:
            logger.exception("%s delete failed for user=%s movie=%s", self.label, user_id, movie_id)
            return Err(
                ErrorCode.DELETE_FAILED, f"Could not remove the movie from the {self.label}."
            )
        return Ok(result.rowcount)

    async def delete_all_for_user(self, user_id: int) -> Ok[int] | Err:
        try:
            result = await self.session.execute(
                delete(self.model).where(self.model.user_id == user_id)
            )
        except SQLAlchemyError:
            logger.exception("%s cleanup failed for user=%s", self.label, user_id)
            return Err(ErrorCode.DELETE_FAILED, f"Could not clear the user's {self.label}.")
        return Ok(result.rowcount)

    async def list_by_user(self, user_id: int) -> Ok[Sequence] | Err:
        """Entries for a user joined with their movie, ordered by title."""
        query = (
            select(self.model)
            .join(self.model.movie)
            .options(contains_eager(self.model.movie))
            .where(self.model.user_id == user_id)
            .order_by(func.lower(Movie.title))
        )
        try:
            result = await self.session.execute(query)
        except SQLAlchemyError:
            logger.exception("%s listing failed for user=%s", self.label, user_id)
            return Err(ErrorCode.LOOKUP_FAILED, f"Could not retrieve the {self.label}.")
        return Ok(result.scalars().all())


class CatalogStore(_UserMovieStore):
    """Owned copies per user."""

    model = CatalogEntry
    label = "catalog"
    duplicate_code = ErrorCode.ALREADY_CATALOGED

    async def insert(self, user_id: int, movie_id: int, copies: int = 1) -> Ok[CatalogEntry] | Err:
        entry = CatalogEntry(
            user_id=user_id,
            movie_id=movie_id,
            copies=copies,
            added_at=datetime.now(UTC),
        )
        return await self._insert(entry)

    async def update(self, user_id: int, movie_id: int, copies: int) -> Ok[int] | Err:
        """Set the copy count, returning how many rows changed (0 when absent)."""
        try:
            async with self.session.begin_nested():
                result = await self.session.execute(
                    update(CatalogEntry)
                    .where(self._match(user_id, movie_id))
                    .values(copies=copies)
                )
        except SQLAlchemyError:
            logger.exception("Catalog update failed for user=%s movie=%s", user_id, movie_id)
            return Err(ErrorCode.UPDATE_FAILED, "Could not update the number of copies.")
        return Ok(result.rowcount)


class WishListStore(_UserMovieStore):
    """Movies each user wants but does not own."""

    model = WishListEntry
    label = "wish list"
    duplicate_code = ErrorCode.ALREADY_WISHED

    async def insert(self, user_id: int, movie_id: int) -> Ok[WishListEntry] | Err:
        entry = WishListEntry(user_id=user_id, movie_id=movie_id, added_at=datetime.now(UTC))
        return await self._insert(entry)


class NewReleaseStore:
    """The new release snapshot table."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def all(self) -> Ok[Sequence[NewRelease]] | Err:
        query = select(NewRelease).order_by(NewRelease.position, NewRelease.id)
        try:
            result = await self.session.execute(query)
        except SQLAlchemyError:
            logger.exception("New release listing failed")
            return Err(ErrorCode.LOOKUP_FAILED, "Could not retrieve new releases.")
        return Ok(result.scalars().all())

    async def clear_all(self) -> Ok[int] | Err:
        """Remove every row and commit."""
        try:
            result = await self.session.execute(delete(NewRelease))
            await self.session.commit()
        except SQLAlchemyError:
            logger.exception("Clearing new releases failed")
            await self.session.rollback()
            return Err(ErrorCode.TRUNCATE_FAILED, "Could not clear new releases.")
        return Ok(result.rowcount)

    async def insert(self, release: NewRelease) -> Ok[NewRelease] | Err:
        """Insert one release and commit."""
        try:
            self.session.add(release)
            await self.session.commit()
        except SQLAlchemyError:
            logger.exception("Inserting new release imdb_id=%s failed", release.imdb_id)
            await self.session.rollback()
            return Err(ErrorCode.INSERT_FAILED, "Could not save the new release.")
        return Ok(release)
