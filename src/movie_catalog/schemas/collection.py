"""Pydantic schemas for catalog and wish list API endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from movie_catalog.schemas.common import ActionResponse
from movie_catalog.schemas.movie import CachedMovie, MovieReference


class AddToCatalog(MovieReference):
    """Schema for adding a movie to the logged-in user's catalog."""

    copies: StrictInt = Field(default=1, description="Number of owned copies (positive)")


class CopiesUpdate(BaseModel):
    """Schema for changing the number of owned copies."""

    copies: StrictInt = Field(description="Number of owned copies (positive)")


class CatalogItem(BaseModel):
    """A cataloged movie."""

    model_config = ConfigDict(from_attributes=True)

    movie: CachedMovie
    copies: int = Field(description="Number of owned copies")
    added_at: datetime = Field(description="When the movie was cataloged")


class WishListItem(BaseModel):
    """A wished-for movie."""

    model_config = ConfigDict(from_attributes=True)

    movie: CachedMovie
    added_at: datetime = Field(description="When the movie was wished for")


class CatalogResponse(ActionResponse):
    """A user's catalog."""

    user_id: int | None = Field(default=None, description="Owner of the catalog")
    catalog: list[CatalogItem] = Field(default_factory=list)


class WishListResponse(ActionResponse):
    """A user's wish list."""

    user_id: int | None = Field(default=None, description="Owner of the wish list")
    wish_list: list[WishListItem] = Field(default_factory=list)


class CatalogAddResponse(ActionResponse):
    """Outcome of adding a movie to the catalog."""

    movie: CachedMovie | None = Field(default=None, description="The cataloged movie")
    copies: int | None = Field(default=None, description="Copies recorded")
    previous_state: str | None = Field(
        default=None, description="absent or in_wish_list before the movie was cataloged"
    )
