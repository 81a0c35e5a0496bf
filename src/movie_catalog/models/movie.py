"""Movie ORM model."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Date, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from movie_catalog.database import Base

if TYPE_CHECKING:
    from movie_catalog.models.collection import CatalogEntry, WishListEntry


class Movie(Base):
    """Movie metadata shared by every catalog and wish list entry.

    Rows are append-only and keyed by their TMDB ID.
    """

    __tablename__ = "movies"

    id: Mapped[int] = mapped_column(primary_key=True)
    imdb_id: Mapped[str | None] = mapped_column(String(20), nullable=True, index=True)
    tmdb_id: Mapped[int] = mapped_column(unique=True, index=True)
    title: Mapped[str] = mapped_column(String(255))
    poster: Mapped[str | None] = mapped_column(String(500), nullable=True)
    release_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    cached_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)

    # Relationships
    catalog_entries: Mapped[list[CatalogEntry]] = relationship(
        back_populates="movie", cascade="all, delete-orphan", passive_deletes=True
    )
    wish_list_entries: Mapped[list[WishListEntry]] = relationship(
        back_populates="movie", cascade="all, delete-orphan", passive_deletes=True
    )
