"""Movie payloads: references sent by clients, TMDB search views and registry rows."""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from movie_catalog.schemas.common import ActionResponse


class MovieReference(BaseModel):
    """Movie payload sent when adding to a catalog or wish list.

    Only ``tmdb_id`` is needed for a movie that is already known; the rest is
    required the first time a movie is referenced.
    """

    model_config = ConfigDict(extra="ignore")

    tmdb_id: int = Field(description="Identifies the movie everywhere in this API")
    imdb_id: str | None = Field(default=None, description="tt-prefixed IMDb title ID")
    title: str | None = None
    poster: str | None = Field(default=None, description="Absolute poster URL")
    release_date: date | None = None

    @field_validator("imdb_id", "title", "poster", "release_date", mode="before")
    @classmethod
    def empty_str_to_none(cls, v: Any) -> Any:
        """Treat empty strings as missing values."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


class MovieSearchResult(BaseModel):
    """A title match, with its poster already resolved to a full URL."""

    tmdb_id: int
    title: str
    original_title: str | None = None
    release_date: date | None = None
    poster_url: str | None = None
    overview: str | None = None
    vote_average: float = 0.0


class MovieVideo(BaseModel):
    """A trailer or clip for a movie."""

    key: str = Field(description="Video key on the hosting site")
    name: str | None = None
    site: str | None = None
    type: str | None = None


class MovieDetails(MovieSearchResult):
    """Everything shown for a single movie looked up by its TMDB ID."""

    imdb_id: str | None = None
    backdrop_url: str | None = None
    runtime: int | None = Field(default=None, description="Minutes")
    tagline: str | None = None
    status: str | None = Field(default=None, description="Rumored, Released, ...")
    watch_providers: dict[str, dict[str, Any]] = Field(
        default_factory=dict, description="Where to watch, keyed by region code"
    )
    videos: list[MovieVideo] = Field(default_factory=list, description="Trailers and clips")


class MovieSearchResponse(ActionResponse):
    """Response for the movie search endpoint (by title or by ID)."""

    films: list[MovieSearchResult] = Field(default_factory=list, description="Title matches")
    film: MovieDetails | None = Field(default=None, description="Film found by ID")


class CachedMovie(BaseModel):
    """A movie as stored in the local registry."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="Registry row ID")
    tmdb_id: int
    imdb_id: str | None = None
    title: str
    poster: str | None = None
    release_date: date | None = None
    cached_at: datetime = Field(description="When the movie was first referenced")


class NewReleaseItem(BaseModel):
    """An upcoming disc release."""

    model_config = ConfigDict(from_attributes=True)

    imdb_id: str
    tmdb_id: int
    title: str = Field(description="Title as known to TMDB")
    poster: str | None = None
    release_week: str = Field(description="Week label the release is announced for")


class NewReleasesResponse(ActionResponse):
    """New releases grouped by their week label, in page order."""

    releases: dict[str, list[NewReleaseItem]] = Field(default_factory=dict)
