"""User ORM model."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from movie_catalog.database import Base

if TYPE_CHECKING:
    from movie_catalog.models.collection import CatalogEntry, WishListEntry


class User(Base):
    """User account model for authentication and ownership."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(String(32), unique=True, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255))
    first_name: Mapped[str] = mapped_column(String(255))
    last_name: Mapped[str] = mapped_column(String(255))
    email: Mapped[str] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)

    # Relationships
    catalog_entries: Mapped[list[CatalogEntry]] = relationship(
        back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
    wish_list_entries: Mapped[list[WishListEntry]] = relationship(
        back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
