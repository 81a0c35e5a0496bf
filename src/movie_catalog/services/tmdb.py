"""TMDB (The Movie Database) client: title search, IMDb ID resolution and details."""

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from movie_catalog.config import get_settings
from movie_catalog.schemas.external import (
    TMDBFindResponse,
    TMDBMovieDetails,
    TMDBMovieResult,
    TMDBSearchResponse,
)
from movie_catalog.services.base import APIError, BaseAPIClient, NotFoundError

IMAGE_BASE_URL = "https://image.tmdb.org/t/p"

ModelT = TypeVar("ModelT", bound=BaseModel)


class TMDBClient(BaseAPIClient):
    """Read-only TMDB v3 client authenticated with a bearer read token."""

    source_name = "TMDB"
    IMAGE_BASE_URL = IMAGE_BASE_URL
    POSTER_SIZES = ("w92", "w154", "w185", "w342", "w500", "w780", "original")
    BACKDROP_SIZES = ("w300", "w780", "w1280", "original")

    # Appended to movie details so one request carries everything the search page shows
    DETAIL_EXTRAS = ("watch/providers", "videos")

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        language: str = "en-US",
    ) -> None:
        settings = get_settings()
        self._api_key = api_key or settings.tmdb_api_key
        if not self._api_key:
            raise ValueError("TMDB API key is required")

        self.language = language
        super().__init__(
            base_url=base_url or settings.tmdb_base_url,
            timeout=timeout or settings.http_timeout,
        )

    @property
    def default_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Accept": "application/json",
        }

    def _parse(self, model: type[ModelT], data: Any) -> ModelT:
        """Validate a TMDB payload; a malformed one is an upstream error."""
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise APIError(f"Unexpected {self.source_name} payload: {e}") from e

    async def search_movies(
        self, query: str, page: int = 1, include_adult: bool = False
    ) -> TMDBSearchResponse:
        """Search movies by title, one page at a time."""
        data = await self.get_json(
            "/search/movie",
            params={
                "query": query,
                "page": page,
                "include_adult": "true" if include_adult else "false",
                "language": self.language,
            },
        )
        return self._parse(TMDBSearchResponse, data)

    async def find_by_imdb_id(self, imdb_id: str) -> list[TMDBMovieResult]:
        """Movies TMDB links to an IMDb title ID, canonical match first.

        An unknown ID is an empty list, not an error.
        """
        data = await self.get_json(
            f"/find/{imdb_id}",
            params={"external_source": "imdb_id", "language": self.language},
        )
        return self._parse(TMDBFindResponse, data).movie_results

    async def get_movie(self, movie_id: int, with_extras: bool = True) -> TMDBMovieDetails:
        """Full details for one movie.

        With ``with_extras`` the response also carries watch providers by region and
        the movie's videos.

        Raises:
            NotFoundError: If TMDB has no movie with this ID.
        """
        params = {"language": self.language}
        if with_extras:
            params["append_to_response"] = ",".join(self.DETAIL_EXTRAS)
        data = await self.get_json(f"/movie/{movie_id}", params=params)
        return self._parse(TMDBMovieDetails, data)

    async def get_movie_or_none(
        self, movie_id: int, with_extras: bool = True
    ) -> TMDBMovieDetails | None:
        try:
            return await self.get_movie(movie_id, with_extras=with_extras)
        except NotFoundError:
            return None

    def _image_url(
        self, path: str | None, size: str, sizes: tuple[str, ...], fallback: str
    ) -> str | None:
        if not path:
            return None
        return f"{self.IMAGE_BASE_URL}/{size if size in sizes else fallback}{path}"

    def get_poster_url(self, poster_path: str | None, size: str = "w342") -> str | None:
        """Absolute poster URL for a TMDB image path; unknown sizes fall back to w342."""
        return self._image_url(poster_path, size, self.POSTER_SIZES, "w342")

    def get_backdrop_url(self, backdrop_path: str | None, size: str = "w780") -> str | None:
        return self._image_url(backdrop_path, size, self.BACKDROP_SIZES, "w780")


async def get_tmdb_client() -> TMDBClient:
    """FastAPI dependency; the route closes the client when done."""
    return TMDBClient()
