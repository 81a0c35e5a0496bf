"""SQLAlchemy ORM models."""

from movie_catalog.models.collection import CatalogEntry, WishListEntry
from movie_catalog.models.movie import Movie
from movie_catalog.models.release import NewRelease
from movie_catalog.models.user import User

__all__ = [
    "CatalogEntry",
    "Movie",
    "NewRelease",
    "User",
    "WishListEntry",
]
