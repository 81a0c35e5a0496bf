"""Business logic and external API clients."""

from movie_catalog.services.base import (
    APIError,
    BaseAPIClient,
    NotFoundError,
    RateLimitError,
)
from movie_catalog.services.result import Err, ErrorCode, ErrorKind, Ok, failure_message
from movie_catalog.services.scraper import ReleaseScraper
from movie_catalog.services.tmdb import TMDBClient, get_tmdb_client

__all__ = [
    "APIError",
    "BaseAPIClient",
    "NotFoundError",
    "RateLimitError",
    "Ok",
    "Err",
    "ErrorCode",
    "ErrorKind",
    "failure_message",
    "TMDBClient",
    "get_tmdb_client",
    "ReleaseScraper",
]
