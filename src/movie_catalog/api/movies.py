"""Movie API endpoints."""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from movie_catalog.database import get_db
from movie_catalog.schemas.movie import (
    MovieDetails,
    MovieSearchResponse,
    MovieSearchResult,
    MovieVideo,
    NewReleaseItem,
    NewReleasesResponse,
)
from movie_catalog.services.base import APIError, NotFoundError
from movie_catalog.services.result import Err, failure_message
from movie_catalog.services.stores import NewReleaseStore
from movie_catalog.services.tmdb import TMDBClient, get_tmdb_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/movies", tags=["movies"])


async def _search_by_title(tmdb_client: TMDBClient, title: str) -> MovieSearchResponse:
    response = await tmdb_client.search_movies(query=title)
    films = [
        MovieSearchResult(
            tmdb_id=movie.id,
            title=movie.title,
            original_title=movie.original_title,
            release_date=movie.release_date,
            poster_url=tmdb_client.get_poster_url(movie.poster_path),
            overview=movie.overview,
            vote_average=movie.vote_average,
        )
        for movie in response.results
    ]
    return MovieSearchResponse(
        success=True, message="Film title query successfully processed", films=films
    )


async def _search_by_id(tmdb_client: TMDBClient, tmdb_id: int) -> MovieSearchResponse:
    movie = await tmdb_client.get_movie_or_none(tmdb_id)
    if movie is None:
        return MovieSearchResponse(success=False, message="No match for movie found.")

    film = MovieDetails(
        tmdb_id=movie.id,
        imdb_id=movie.imdb_id,
        title=movie.title,
        original_title=movie.original_title,
        release_date=movie.release_date,
        poster_url=tmdb_client.get_poster_url(movie.poster_path),
        backdrop_url=tmdb_client.get_backdrop_url(movie.backdrop_path),
        overview=movie.overview,
        runtime=movie.runtime,
        vote_average=movie.vote_average,
        tagline=movie.tagline,
        status=movie.status,
        watch_providers=movie.watch_providers.results if movie.watch_providers else {},
        videos=[
            MovieVideo(key=video.key, name=video.name, site=video.site, type=video.type)
            for video in (movie.videos.results if movie.videos else [])
        ],
    )
    return MovieSearchResponse(
        success=True, message="Film ID query successfully processed", film=film
    )


@router.get("", response_model=MovieSearchResponse)
async def search_movies(
    title: str | None = Query(None, description="Search by title"),
    tmdb_id: int | None = Query(None, alias="id", description="Search by TMDB ID"),
    tmdb_client: TMDBClient = Depends(get_tmdb_client),
) -> MovieSearchResponse:
    """Search TMDB for movies by title, or fetch one movie by its TMDB ID.

    Exactly one of ``title`` and ``id`` must be given. Lookups by ID include watch
    providers and videos.
    """
    try:
        if not title and tmdb_id is None:
            return MovieSearchResponse(success=False, message="Missing parameter: title OR id")
        if title and tmdb_id is not None:
            return MovieSearchResponse(success=False, message="You may search by title OR id")

        if title:
            return await _search_by_title(tmdb_client, title)
        return await _search_by_id(tmdb_client, tmdb_id)
    except NotFoundError:
        return MovieSearchResponse(success=False, message="No match for movie found.")
    except APIError as e:
        logger.warning("Movie search failed: %s", e)
        return MovieSearchResponse(success=False, message="Could not reach the movie database.")
    finally:
        await tmdb_client.close()


@router.get("/new-releases", response_model=NewReleasesResponse)
async def get_new_releases(db: AsyncSession = Depends(get_db)) -> NewReleasesResponse:
    """Get announced disc releases grouped by release week, in page order."""
    result = await NewReleaseStore(db).all()
    if isinstance(result, Err):
        return NewReleasesResponse(success=False, message=failure_message(result))

    releases: dict[str, list[NewReleaseItem]] = {}
    for release in result.value:
        releases.setdefault(release.release_week, []).append(
            NewReleaseItem.model_validate(release)
        )
    return NewReleasesResponse(success=True, message="New releases retrieved.", releases=releases)
