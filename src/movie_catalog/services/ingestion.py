"""New release ingestion: scrape, clear the snapshot, enrich and store each title.

The run is all-or-nothing up to the point the snapshot is cleared. After that every
scraped title is enriched and stored on its own, and a failed title never stops or
undoes the others.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from movie_catalog.models.release import NewRelease
from movie_catalog.schemas.external import ScrapedRelease, TMDBMovieResult
from movie_catalog.services.base import APIError
from movie_catalog.services.result import Err, ErrorCode, Ok
from movie_catalog.services.stores import NewReleaseStore

logger = logging.getLogger(__name__)

POSTER_SIZE = "w342"


class ReleaseSource(Protocol):
    async def scrape_announced_releases(self) -> list[ScrapedRelease]: ...


class MetadataProvider(Protocol):
    async def find_by_imdb_id(self, imdb_id: str) -> list[TMDBMovieResult]: ...

    def get_poster_url(self, poster_path: str | None, size: str = ...) -> str | None: ...


class RunStatus(StrEnum):
    COMPLETED = "completed"
    SKIPPED = "skipped"  # Nothing scraped, snapshot left as it was


@dataclass(frozen=True)
class ItemOutcome:
    imdb_id: str
    title: str
    inserted: bool
    reason: str | None = None


@dataclass
class IngestionReport:
    status: RunStatus
    scraped: int = 0
    outcomes: list[ItemOutcome] = field(default_factory=list)
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def inserted(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.inserted)

    @property
    def failed(self) -> int:
        return sum(1 for outcome in self.outcomes if not outcome.inserted)


class ReleaseIngestionPipeline:
    """One scheduled run of the new release ingestion."""

    def __init__(
        self,
        scraper: ReleaseSource,
        metadata: MetadataProvider,
        session_factory: async_sessionmaker[AsyncSession],
        concurrency: int = 8,
    ) -> None:
        self.scraper = scraper
        self.metadata = metadata
        self.session_factory = session_factory
        self._limit = asyncio.Semaphore(concurrency)

    async def run(self) -> Ok[IngestionReport] | Err:
        try:
            scraped = await self.scraper.scrape_announced_releases()
        except APIError as e:
            logger.error("Scraping announced releases failed: %s", e)
            return Err(ErrorCode.SCRAPE_FAILED, "Could not retrieve announced releases.")

        if not scraped:
            logger.warning("Scrape returned no releases, keeping the current snapshot")
            return Ok(IngestionReport(status=RunStatus.SKIPPED))

        async with self.session_factory() as session:
            cleared = await NewReleaseStore(session).clear_all()
        if isinstance(cleared, Err):
            logger.error("Aborting ingestion: %s", cleared.message)
            return cleared
        logger.info("Cleared %d previous releases", cleared.value)

        async with asyncio.TaskGroup() as group:
            tasks = [
                group.create_task(self._ingest_one(position, release))
                for position, release in enumerate(scraped)
            ]

        report = IngestionReport(
            status=RunStatus.COMPLETED,
            scraped=len(scraped),
            outcomes=[task.result() for task in tasks],
        )
        logger.info(
            "Ingestion finished: %d scraped, %d inserted, %d failed",
            report.scraped,
            report.inserted,
            report.failed,
        )
        return Ok(report)

    async def _ingest_one(self, position: int, release: ScrapedRelease) -> ItemOutcome:
        # Runs inside the task group: anything raised here would cancel the other items
        async with self._limit:
            try:
                return await self._enrich_and_store(position, release)
            except Exception:
                logger.exception(
                    "Unexpected error ingesting %s (%s)", release.title, release.imdb_id
                )
                return ItemOutcome(release.imdb_id, release.title, False, "unexpected error")

    async def _enrich_and_store(self, position: int, release: ScrapedRelease) -> ItemOutcome:
        try:
            matches = await self.metadata.find_by_imdb_id(release.imdb_id)
        except APIError as e:
            logger.warning(
                "Metadata lookup failed for %s (%s): %s", release.title, release.imdb_id, e
            )
            return ItemOutcome(release.imdb_id, release.title, False, "lookup failed")

        if not matches:
            logger.warning("No metadata match for %s (%s)", release.title, release.imdb_id)
            return ItemOutcome(release.imdb_id, release.title, False, "no match")

        record = self.build_record(position, release, matches[0])
        async with self.session_factory() as session:
            stored = await NewReleaseStore(session).insert(record)
        if isinstance(stored, Err):
            return ItemOutcome(release.imdb_id, release.title, False, stored.message)
        return ItemOutcome(release.imdb_id, record.title, True)

    def build_record(
        self, position: int, release: ScrapedRelease, match: TMDBMovieResult
    ) -> NewRelease:
        """Combine a scraped release with its canonical metadata match."""
        return NewRelease(
            imdb_id=release.imdb_id,
            tmdb_id=match.id,
            title=match.title,
            poster=self.metadata.get_poster_url(match.poster_path, POSTER_SIZE) or release.poster,
            release_week=release.release_week,
            position=position,
            ingested_at=datetime.now(UTC),
        )
