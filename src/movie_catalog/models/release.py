"""New release snapshot ORM model."""

from datetime import datetime

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from movie_catalog.database import Base


class NewRelease(Base):
    """An upcoming disc release from the latest ingestion run.

    Not linked to the movies table; the whole table is replaced on every run.
    """

    __tablename__ = "new_releases"

    id: Mapped[int] = mapped_column(primary_key=True)
    imdb_id: Mapped[str] = mapped_column(String(20))
    tmdb_id: Mapped[int] = mapped_column()
    title: Mapped[str] = mapped_column(String(255))
    poster: Mapped[str | None] = mapped_column(String(500), nullable=True)
    release_week: Mapped[str] = mapped_column(String(50), index=True)
    position: Mapped[int] = mapped_column(default=0)  # Order on the scraped page
    ingested_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
