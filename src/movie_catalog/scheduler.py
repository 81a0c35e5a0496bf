"""Scheduling for the new release ingestion job."""

import asyncio
import logging
import sys

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from movie_catalog.config import get_settings
from movie_catalog.database import async_session
from movie_catalog.services.ingestion import IngestionReport, ReleaseIngestionPipeline
from movie_catalog.services.result import Err
from movie_catalog.services.scraper import ReleaseScraper
from movie_catalog.services.tmdb import TMDBClient

logger = logging.getLogger(__name__)

JOB_ID = "new_release_ingestion"

_scheduler: AsyncIOScheduler | None = None


async def run_release_ingestion() -> IngestionReport | None:
    """Run one ingestion against the application database.

    Returns the report, or None when the run was aborted.
    """
    settings = get_settings()
    scraper = ReleaseScraper()
    tmdb_client = TMDBClient()
    try:
        pipeline = ReleaseIngestionPipeline(
            scraper=scraper,
            metadata=tmdb_client,
            session_factory=async_session,
            concurrency=settings.ingest_concurrency,
        )
        result = await pipeline.run()
    finally:
        await scraper.close()
        await tmdb_client.close()

    if isinstance(result, Err):
        logger.error("New release ingestion aborted (%s): %s", result.code, result.message)
        return None
    return result.value


def start_jobs() -> AsyncIOScheduler:
    """Start the scheduler with the ingestion cron job. Idempotent."""
    global _scheduler
    if _scheduler:
        return _scheduler

    settings = get_settings()
    _scheduler = AsyncIOScheduler()
    _scheduler.add_job(
        run_release_ingestion,
        CronTrigger.from_crontab(settings.ingest_cron),
        id=JOB_ID,
        coalesce=True,
        max_instances=1,
    )
    _scheduler.start()
    logger.info("Scheduled new release ingestion (%s)", settings.ingest_cron)
    return _scheduler


def stop_jobs() -> None:
    global _scheduler
    if _scheduler:
        _scheduler.shutdown(wait=False)
        _scheduler = None


def main() -> None:
    """Run a single ingestion, for use from cron."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    report = asyncio.run(run_release_ingestion())
    sys.exit(0 if report is not None else 1)


if __name__ == "__main__":
    main()
