"""SKTorrent search listing client.

Sends one query to ``torrents_v2.php`` and turns the result table into
:class:`SearchHit` rows.  Each hit is a thumbnail link to
``details.php?id=...`` whose enclosing cell also carries the category
(first ``<b>``), the size (``Velkost 1.4 GB |``) and the seeder count
(``Odosielaju : 12``).
"""

from __future__ import annotations

import re

import httpx
import structlog
from bs4 import BeautifulSoup, Tag

from sktorrent.domain.entities.stremio import SearchHit
from sktorrent.domain.exceptions import SearchFailed
from sktorrent.infrastructure.common.converters import to_int
from sktorrent.infrastructure.common.html_selectors import (
    enclosing,
    extract_attr,
    extract_text,
    flat_text,
    parse_html,
    select_items,
)
from sktorrent.infrastructure.config.schema import SktorrentConfig
from sktorrent.infrastructure.stremio.title_normalizer import strip_diacritics

log = structlog.get_logger(__name__)

_SEARCH_PATH = "/torrent/torrents_v2.php"
_DOWNLOAD_PATH = "/torrent/download.php"
_ALL_CATEGORIES = 0

_HIT_SELECTOR = 'a[href^="details.php"] img'
_SIZE_RE = re.compile(r"Velkost\s([^|]+)", re.IGNORECASE)
_SEEDS_RE = re.compile(r"Odosielaju\s*:\s*(\d+)", re.IGNORECASE)

# Movies, series, TV shows, documentaries, sport.  Matched against the
# diacritic-stripped, lower-cased category ("Seriály", "TV pořad", ...).
_ACCEPTED_CATEGORY_RE = re.compile(r"film|seri|tv porad|dokument|sport")


def is_accepted_category(category: str) -> bool:
    """True for categories that can hold playable video."""
    return bool(_ACCEPTED_CATEGORY_RE.search(strip_diacritics(category).lower()))


class SktorrentSearchClient:
    """Search adapter for sktorrent.eu.

    Implements ``SearchProviderPort``.  Transport and parse errors are
    logged and reported as an empty result; nothing is raised.
    """

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        config: SktorrentConfig,
    ) -> None:
        self._http = http_client
        self._base_url = config.base_url.rstrip("/")
        self._cookie = config.cookie_header()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _download_url(self, torrent_id: str) -> str:
        return f"{self._base_url}{_DOWNLOAD_PATH}?id={torrent_id}"

    def _parse_hit(self, img: Tag) -> SearchHit | None:
        anchor = enclosing(img, "a")
        if anchor is None:
            return None
        cell = enclosing(anchor, "td")
        if cell is None:
            return None

        href = extract_attr(anchor, "", "href")
        torrent_id = href.split("id=")[-1]
        if not torrent_id:
            return None

        category = extract_text(cell, "b")
        if not is_accepted_category(category):
            log.debug("sktorrent_hit_category_skipped", category=category)
            return None

        block = flat_text(cell)
        size_match = _SIZE_RE.search(block)
        seeds_match = _SEEDS_RE.search(block)

        return SearchHit(
            raw_name=extract_attr(anchor, "", "title"),
            external_id=torrent_id,
            size_text=size_match.group(1).strip() if size_match else "?",
            seed_count=(to_int(seeds_match.group(1)) or 0) if seeds_match else 0,
            category=category,
            fetch_url=self._download_url(torrent_id),
        )

    def parse_listing(self, soup: BeautifulSoup) -> list[SearchHit]:
        """Extract accepted hits from a parsed results page, in page order."""
        hits: list[SearchHit] = []
        for img in select_items(soup, _HIT_SELECTOR):
            hit = self._parse_hit(img)
            if hit is not None:
                hits.append(hit)
        return hits

    async def _search(self, query: str) -> list[SearchHit]:
        """Run one query.

        Raises:
            SearchFailed: on transport errors, bad status or unparsable HTML.
        """
        params = {"search": query.replace(".", " "), "category": _ALL_CATEGORIES}
        try:
            resp = await self._http.get(
                f"{self._base_url}{_SEARCH_PATH}",
                params=params,
                headers={"Cookie": self._cookie},
            )
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise SearchFailed(f"Search request failed for {query!r}: {exc}") from exc

        try:
            soup = parse_html(resp.text)
        except (ValueError, TypeError) as exc:
            raise SearchFailed(f"Unparsable listing for {query!r}: {exc}") from exc
        return self.parse_listing(soup)

    # ------------------------------------------------------------------
    # Public API (SearchProviderPort)
    # ------------------------------------------------------------------

    async def search(self, query: str) -> list[SearchHit]:
        """Run one query; failures are logged and yield ``[]``."""
        log.info("sktorrent_search", query=query)
        try:
            hits = await self._search(query)
        except SearchFailed:
            log.warning("sktorrent_search_failed", query=query, exc_info=True)
            return []
        log.info("sktorrent_search_done", query=query, hit_count=len(hits))
        return hits
