"""Catalog and wish list ORM models."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from movie_catalog.database import Base

if TYPE_CHECKING:
    from movie_catalog.models.movie import Movie
    from movie_catalog.models.user import User


class CatalogEntry(Base):
    """Copies of a movie owned by a user."""

    __tablename__ = "catalog"
    __table_args__ = (CheckConstraint("copies >= 1", name="ck_catalog_copies_positive"),)

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    movie_id: Mapped[int] = mapped_column(
        ForeignKey("movies.id", ondelete="CASCADE"), primary_key=True, index=True
    )
    copies: Mapped[int] = mapped_column(default=1)
    added_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)

    # Relationships
    user: Mapped[User] = relationship(back_populates="catalog_entries")
    movie: Mapped[Movie] = relationship(back_populates="catalog_entries")


class WishListEntry(Base):
    """A movie a user wants but does not own.

    A (user, movie) pair never has both a catalog and a wish list row.
    """

    __tablename__ = "wish_list"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    movie_id: Mapped[int] = mapped_column(
        ForeignKey("movies.id", ondelete="CASCADE"), primary_key=True, index=True
    )
    added_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)

    # Relationships
    user: Mapped[User] = relationship(back_populates="wish_list_entries")
    movie: Mapped[Movie] = relationship(back_populates="wish_list_entries")
