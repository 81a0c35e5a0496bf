"""Catalog and wish list reconciliation.

A (user, movie) pair is in exactly one of three states: absent, wished for, or
cataloged. Adding to the catalog evicts a wish list entry; a cataloged movie cannot
be wished for.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from movie_catalog.models.collection import CatalogEntry, WishListEntry
from movie_catalog.models.movie import Movie
from movie_catalog.models.user import User
from movie_catalog.schemas.movie import MovieReference
from movie_catalog.services.registry import MovieRegistry
from movie_catalog.services.result import Err, ErrorCode, Ok
from movie_catalog.services.stores import CatalogStore, WishListStore
from movie_catalog.utils.security import AuthContext

logger = logging.getLogger(__name__)


class CollectionState(StrEnum):
    ABSENT = "absent"
    IN_WISH_LIST = "in_wish_list"
    IN_CATALOG = "in_catalog"


@dataclass(frozen=True)
class CatalogAddition:
    """Outcome of adding a movie to a catalog."""

    movie: Movie
    copies: int
    previous_state: CollectionState


def validate_copies(copies: object) -> Err | None:
    """Copies must be a positive integer."""
    if isinstance(copies, bool) or not isinstance(copies, int) or copies < 1:
        return Err(ErrorCode.INVALID_INPUT, "Copies must be a positive whole number.")
    return None


class CollectionService:
    """Reconciles the movie registry, catalog and wish list for one request."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.registry = MovieRegistry(session)
        self.catalog = CatalogStore(session)
        self.wish_list = WishListStore(session)

    async def state_of(self, user_id: int, movie_id: int) -> Ok[CollectionState] | Err:
        in_catalog = await self.catalog.exists(user_id, movie_id)
        if isinstance(in_catalog, Err):
            return in_catalog
        if in_catalog.value:
            return Ok(CollectionState.IN_CATALOG)

        in_wish_list = await self.wish_list.exists(user_id, movie_id)
        if isinstance(in_wish_list, Err):
            return in_wish_list
        if in_wish_list.value:
            return Ok(CollectionState.IN_WISH_LIST)
        return Ok(CollectionState.ABSENT)

    async def _resolve(self, tmdb_id: int) -> Ok[Movie] | Err:
        found = await self.registry.get_by_tmdb_id(tmdb_id)
        if isinstance(found, Err):
            return found
        if found.value is None:
            return Err(ErrorCode.MOVIE_NOT_FOUND, "No match for movie found.")
        return Ok(found.value)

    async def add_to_catalog(
        self, auth: AuthContext, ref: MovieReference, copies: int = 1
    ) -> Ok[CatalogAddition] | Err:
        """Catalog a movie, moving it out of the wish list if it was there.

        The state check, wish list eviction and catalog insert share one savepoint,
        so a failure part way leaves the pair as it was.
        """
        invalid = validate_copies(copies)
        if invalid:
            return invalid

        movie = await self.registry.find_or_create(ref)
        if isinstance(movie, Err):
            return movie

        savepoint = await self.session.begin_nested()
        outcome = await self._catalog_movie(auth.user_id, movie.value, copies)
        if isinstance(outcome, Err):
            await savepoint.rollback()
            return outcome
        await savepoint.commit()

        logger.info(
            "User %s cataloged tmdb_id=%s (%d copies, was %s)",
            auth.user_id,
            movie.value.tmdb_id,
            copies,
            outcome.value.previous_state,
        )
        return outcome

    async def _catalog_movie(
        self, user_id: int, movie: Movie, copies: int
    ) -> Ok[CatalogAddition] | Err:
        state = await self.state_of(user_id, movie.id)
        if isinstance(state, Err):
            return state
        if state.value is CollectionState.IN_CATALOG:
            return Err(ErrorCode.ALREADY_CATALOGED, "Movie is already in the user's catalog.")

        if state.value is CollectionState.IN_WISH_LIST:
            evicted = await self.wish_list.delete(user_id, movie.id)
            if isinstance(evicted, Err):
                return evicted

        inserted = await self.catalog.insert(user_id, movie.id, copies)
        if isinstance(inserted, Err):
            return inserted
        return Ok(CatalogAddition(movie=movie, copies=copies, previous_state=state.value))

    async def add_to_wish_list(self, auth: AuthContext, ref: MovieReference) -> Ok[Movie] | Err:
        """Wish for a movie the user neither owns nor already wishes for."""
        movie = await self.registry.find_or_create(ref)
        if isinstance(movie, Err):
            return movie

        savepoint = await self.session.begin_nested()
        state = await self.state_of(auth.user_id, movie.value.id)
        if isinstance(state, Err):
            await savepoint.rollback()
            return state
        if state.value is CollectionState.IN_CATALOG:
            await savepoint.rollback()
            return Err(ErrorCode.ALREADY_OWNED, "Movie is in user's catalog.")
        if state.value is CollectionState.IN_WISH_LIST:
            await savepoint.rollback()
            return Err(ErrorCode.ALREADY_WISHED, "Movie has already been wished for user.")

        inserted = await self.wish_list.insert(auth.user_id, movie.value.id)
        if isinstance(inserted, Err):
            await savepoint.rollback()
            return inserted
        await savepoint.commit()

        logger.info("User %s wished for tmdb_id=%s", auth.user_id, movie.value.tmdb_id)
        return Ok(movie.value)

    async def remove_from_catalog(self, auth: AuthContext, tmdb_id: int) -> Ok[bool] | Err:
        """Remove a movie from the catalog.

        Succeeds even when the movie was not cataloged; the value tells whether a
        row was actually removed.
        """
        movie = await self._resolve(tmdb_id)
        if isinstance(movie, Err):
            return movie

        removed = await self.catalog.delete(auth.user_id, movie.value.id)
        if isinstance(removed, Err):
            return removed
        return Ok(removed.value > 0)

    async def remove_from_wish_list(self, auth: AuthContext, tmdb_id: int) -> Ok[Movie] | Err:
        """Remove a movie from the wish list; fails if it is not there."""
        movie = await self._resolve(tmdb_id)
        if isinstance(movie, Err):
            return movie

        wished = await self.wish_list.exists(auth.user_id, movie.value.id)
        if isinstance(wished, Err):
            return wished
        if not wished.value:
            return Err(ErrorCode.NOT_IN_WISH_LIST, "Movie is not in user's wish list.")

        removed = await self.wish_list.delete(auth.user_id, movie.value.id)
        if isinstance(removed, Err):
            return removed
        return Ok(movie.value)

    async def update_copy_count(
        self, auth: AuthContext, tmdb_id: int, copies: int
    ) -> Ok[bool] | Err:
        """Set the number of owned copies.

        Succeeds even when the movie is not cataloged; the value tells whether a
        row was actually changed.
        """
        invalid = validate_copies(copies)
        if invalid:
            return invalid

        movie = await self._resolve(tmdb_id)
        if isinstance(movie, Err):
            return movie

        updated = await self.catalog.update(auth.user_id, movie.value.id, copies)
        if isinstance(updated, Err):
            return updated
        return Ok(updated.value > 0)

    async def _require_user(self, user_id: int) -> Ok[User] | Err:
        try:
            user = await self.session.get(User, user_id)
        except SQLAlchemyError:
            logger.exception("User lookup failed for user=%s", user_id)
            return Err(ErrorCode.LOOKUP_FAILED, "Could not look up the user.")
        if user is None:
            return Err(ErrorCode.USER_NOT_FOUND, "No user with a matching ID found.")
        return Ok(user)

    async def catalog_for(self, user_id: int) -> Ok[Sequence[CatalogEntry]] | Err:
        """A user's catalog, for the owner or a visitor."""
        user = await self._require_user(user_id)
        if isinstance(user, Err):
            return user
        return await self.catalog.list_by_user(user_id)

    async def wish_list_for(self, user_id: int) -> Ok[Sequence[WishListEntry]] | Err:
        """A user's wish list, for the owner or a visitor."""
        user = await self._require_user(user_id)
        if isinstance(user, Err):
            return user
        return await self.wish_list.list_by_user(user_id)
