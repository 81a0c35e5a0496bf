"""Scraper for announced disc releases."""

import logging
import re
from html.parser import HTMLParser

from movie_catalog.config import get_settings
from movie_catalog.schemas.external import ScrapedRelease
from movie_catalog.services.base import BaseAPIClient

logger = logging.getLogger(__name__)

IMDB_ID_PATTERN = re.compile(r"(tt\d+)")
TITLE_SUFFIX = " DVD Release Date"


def _classes(attrs: list[tuple[str, str | None]]) -> set[str]:
    for name, value in attrs:
        if name == "class" and value:
            return set(value.split())
    return set()


class ReleasePageParser(HTMLParser):
    """Streaming parser for the weekly release tables.

    Each ``table.fieldtable-inner`` is one week. Its ``.reldate`` element holds the
    week label and every ``td.dvdcell`` inside it is one release.
    """

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.releases: list[ScrapedRelease] = []
        self._table_depth = 0
        self._td_depth = 0
        self._week_depth: int | None = None
        self._week_label = ""
        self._label_tag: str | None = None
        self._label_nesting = 0
        self._label_parts: list[str] = []
        self._cell_depth: int | None = None
        self._cell: dict[str, str | None] = {}
        self._in_imdb_cell = False
        self._imdb_cell_depth: int | None = None

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        classes = _classes(attrs)

        if self._label_tag is not None:
            if tag == self._label_tag:
                self._label_nesting += 1
            elif tag == "br":
                self._label_parts.append(" ")

        if tag == "table":
            self._table_depth += 1
            if "fieldtable-inner" in classes and self._week_depth is None:
                self._week_depth = self._table_depth
                self._week_label = ""
            return

        if self._week_depth is None:
            return

        if "reldate" in classes and self._label_tag is None:
            self._label_tag = tag
            self._label_nesting = 1
            self._label_parts = []

        if tag == "td":
            self._td_depth += 1
            if "dvdcell" in classes and self._cell_depth is None:
                self._cell_depth = self._td_depth
                self._cell = {"title": None, "poster": None, "imdb_id": None}
            elif "imdblink" in classes and self._cell_depth is not None:
                self._in_imdb_cell = True
                self._imdb_cell_depth = self._td_depth
            return

        if self._cell_depth is None:
            return

        attr_map = dict(attrs)
        if tag == "img" and "movieimg" in classes and self._cell["title"] is None:
            title = attr_map.get("title") or attr_map.get("alt") or ""
            self._cell["title"] = title.replace(TITLE_SUFFIX, "").strip() or None
            self._cell["poster"] = attr_map.get("src")
        elif tag == "a" and self._in_imdb_cell and self._cell["imdb_id"] is None:
            match = IMDB_ID_PATTERN.search(attr_map.get("href") or "")
            if match:
                self._cell["imdb_id"] = match.group(1)

    def handle_endtag(self, tag: str) -> None:
        if self._label_tag is not None and tag == self._label_tag:
            self._label_nesting -= 1
            if self._label_nesting == 0:
                self._week_label = " ".join("".join(self._label_parts).split())
                self._label_tag = None

        if tag == "td" and self._week_depth is not None:
            if self._imdb_cell_depth == self._td_depth:
                self._in_imdb_cell = False
                self._imdb_cell_depth = None
            if self._cell_depth == self._td_depth:
                self._finish_cell()
            self._td_depth = max(self._td_depth - 1, 0)
        elif tag == "table":
            if self._week_depth == self._table_depth:
                self._week_depth = None
                self._td_depth = 0
            self._table_depth = max(self._table_depth - 1, 0)

    def handle_data(self, data: str) -> None:
        if self._label_tag is not None:
            self._label_parts.append(data)

    def _finish_cell(self) -> None:
        cell = self._cell
        self._cell_depth = None
        self._cell = {}
        if not cell.get("title") or not cell.get("imdb_id"):
            logger.debug("Skipping release cell without title or IMDB link: %s", cell)
            return
        self.releases.append(
            ScrapedRelease(
                title=cell["title"],
                poster=cell["poster"],
                imdb_id=cell["imdb_id"],
                release_week=self._week_label,
            )
        )


def parse_release_page(html: str) -> list[ScrapedRelease]:
    """Extract every announced release from the release page HTML."""
    parser = ReleasePageParser()
    parser.feed(html)
    parser.close()
    return parser.releases


class ReleaseScraper(BaseAPIClient):
    """Fetches the release calendar page and extracts announced titles."""

    source_name = "Release page"

    def __init__(self, url: str | None = None, timeout: float | None = None) -> None:
        settings = get_settings()
        super().__init__(
            base_url=url or settings.release_source_url,
            timeout=timeout or settings.http_timeout,
        )

    @property
    def default_headers(self) -> dict[str, str]:
        return {
            "Accept": "text/html,application/xhtml+xml",
            "User-Agent": "MovieCatalog/1.0 (+new release ingestion)",
        }

    async def scrape_announced_releases(self) -> list[ScrapedRelease]:
        """Fetch and parse the release page.

        Raises:
            APIError: If the page cannot be fetched.
        """
        html = await self.get_text("/")
        releases = parse_release_page(html)
        logger.info("Scraped %d announced releases from %s", len(releases), self.base_url)
        return releases
