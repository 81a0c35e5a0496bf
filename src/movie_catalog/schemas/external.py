"""Payloads received from outside: TMDB responses and scraped release page entries."""

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _TMDBModel(BaseModel):
    """TMDB sends fields we do not use, and ``""`` for unknown release dates."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("release_date", mode="before", check_fields=False)
    @classmethod
    def blank_date_is_none(cls, v: Any) -> Any:
        return None if v == "" else v


class TMDBMovieResult(_TMDBModel):
    """A movie as listed by search and find endpoints."""

    id: int = Field(description="TMDB movie ID")
    title: str
    original_title: str | None = None
    release_date: date | None = None
    poster_path: str | None = Field(default=None, description="Relative poster path")
    overview: str | None = None
    vote_average: float = 0.0


class TMDBSearchResponse(_TMDBModel):
    """One page of ``/search/movie`` results."""

    page: int
    total_pages: int
    total_results: int
    results: list[TMDBMovieResult] = Field(default_factory=list)


class TMDBFindResponse(_TMDBModel):
    """``/find/{external_id}``; only the movie matches are kept, canonical first."""

    movie_results: list[TMDBMovieResult] = Field(default_factory=list)


class TMDBVideo(_TMDBModel):
    key: str = Field(description="Video key on the hosting site")
    name: str | None = None
    site: str | None = Field(default=None, description="YouTube, Vimeo, ...")
    type: str | None = Field(default=None, description="Trailer, Teaser, Clip, ...")


class TMDBVideoList(_TMDBModel):
    results: list[TMDBVideo] = Field(default_factory=list)


class TMDBWatchProviders(_TMDBModel):
    """Where to stream, rent or buy, keyed by ISO region code."""

    results: dict[str, dict[str, Any]] = Field(default_factory=dict)


class TMDBMovieDetails(_TMDBModel):
    """``/movie/{id}``, optionally with watch providers and videos appended."""

    id: int
    imdb_id: str | None = None
    title: str
    original_title: str | None = None
    release_date: date | None = None
    poster_path: str | None = None
    backdrop_path: str | None = None
    overview: str | None = None
    runtime: int | None = Field(default=None, description="Minutes")
    vote_average: float = 0.0
    status: str | None = None
    tagline: str | None = None
    videos: TMDBVideoList | None = None
    watch_providers: TMDBWatchProviders | None = Field(default=None, alias="watch/providers")


class ScrapedRelease(BaseModel):
    """One announced title scraped from the release page."""

    title: str = Field(description="Title as shown on the release page")
    poster: str | None = Field(default=None, description="Poster image URL on the release page")
    imdb_id: str = Field(description="IMDB ID linked from the release")
    release_week: str = Field(description="Week label as printed, e.g. 'Tuesday January 7, 2025'")
