"""Pydantic schemas for request/response validation."""

from movie_catalog.schemas.collection import (
    AddToCatalog,
    CatalogAddResponse,
    CatalogItem,
    CatalogResponse,
    CopiesUpdate,
    WishListItem,
    WishListResponse,
)
from movie_catalog.schemas.common import ActionResponse
from movie_catalog.schemas.external import (
    ScrapedRelease,
    TMDBFindResponse,
    TMDBMovieDetails,
    TMDBMovieResult,
    TMDBSearchResponse,
)
from movie_catalog.schemas.movie import (
    CachedMovie,
    MovieDetails,
    MovieReference,
    MovieSearchResponse,
    MovieSearchResult,
    NewReleaseItem,
    NewReleasesResponse,
)
from movie_catalog.schemas.user import (
    AccountResponse,
    CurrentUserResponse,
    LoginResponse,
    UserCreate,
    UserLogin,
    UserResponse,
    UserUpdate,
)

__all__ = [
    "ActionResponse",
    # External payloads
    "TMDBMovieResult",
    "TMDBSearchResponse",
    "TMDBFindResponse",
    "TMDBMovieDetails",
    "ScrapedRelease",
    # Movie schemas
    "MovieReference",
    "MovieSearchResult",
    "MovieSearchResponse",
    "MovieDetails",
    "CachedMovie",
    "NewReleaseItem",
    "NewReleasesResponse",
    # Catalog and wish list schemas
    "AddToCatalog",
    "CopiesUpdate",
    "CatalogItem",
    "CatalogResponse",
    "CatalogAddResponse",
    "WishListItem",
    "WishListResponse",
    # User schemas
    "UserCreate",
    "UserUpdate",
    "UserLogin",
    "UserResponse",
    "AccountResponse",
    "CurrentUserResponse",
    "LoginResponse",
]
