"""Movie registry: one row per TMDB ID, shared by catalogs and wish lists."""

import logging
from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from movie_catalog.models.movie import Movie
from movie_catalog.schemas.movie import MovieReference
from movie_catalog.services.result import Err, ErrorCode, Ok

logger = logging.getLogger(__name__)


def missing_movie_fields(ref: MovieReference) -> list[str]:
    """Return the fields a new movie row still needs."""
    missing = [name for name in ("title", "poster") if not getattr(ref, name)]
    if ref.imdb_id is None and ref.release_date is None:
        missing.append("imdb_id or release_date")
    return missing


class MovieRegistry:
    """Find-or-create access to the movies table."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_tmdb_id(self, tmdb_id: int) -> Ok[Movie | None] | Err:
        """Look a movie up by TMDB ID."""
        try:
            result = await self.session.execute(select(Movie).where(Movie.tmdb_id == tmdb_id))
        except SQLAlchemyError:
            logger.exception("Movie lookup failed for tmdb_id=%s", tmdb_id)
            return Err(ErrorCode.LOOKUP_FAILED, "Could not check movies for a match.")
        return Ok(result.scalar_one_or_none())

    async def find_or_create(self, ref: MovieReference) -> Ok[Movie] | Err:
        """Return the movie for ``ref.tmdb_id``, inserting it on first reference.

        An existing row short-circuits validation of the rest of the payload.
        """
        found = await self.get_by_tmdb_id(ref.tmdb_id)
        if isinstance(found, Err):
            return found
        if found.value is not None:
            return Ok(found.value)

        missing = missing_movie_fields(ref)
        if missing:
            return Err(
                ErrorCode.INVALID_INPUT,
                f"Missing parameter(s) for a new movie: {', '.join(missing)}.",
            )

        movie = Movie(
            tmdb_id=ref.tmdb_id,
            imdb_id=ref.imdb_id,
            title=ref.title,
            poster=ref.poster,
            release_date=ref.release_date,
            cached_at=datetime.now(UTC),
        )
        try:
            async with self.session.begin_nested():
                self.session.add(movie)
                await self.session.flush()
        except IntegrityError:
            # Another request created the same TMDB ID first; use its row.
            logger.info("Movie tmdb_id=%s was created concurrently, re-reading", ref.tmdb_id)
            again = await self.get_by_tmdb_id(ref.tmdb_id)
            if isinstance(again, Ok) and again.value is not None:
                return Ok(again.value)
            return Err(ErrorCode.INSERT_FAILED, "Could not add the movie to the database.")
        except SQLAlchemyError:
            logger.exception("Movie insert failed for tmdb_id=%s", ref.tmdb_id)
            return Err(ErrorCode.INSERT_FAILED, "Could not add the movie to the database.")

        logger.info("Registered movie tmdb_id=%s as id=%s", movie.tmdb_id, movie.id)
        return Ok(movie)
