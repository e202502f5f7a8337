"""IMDb title scraper: title resolution without an API key.

Reads the public title page: the ``<title>`` element carries the
localised display title ("Dune (2021) - IMDb") and the ld+json block the
original ``name``.
"""

from __future__ import annotations

import html
import json
from typing import Any

import httpx
import structlog
from bs4 import BeautifulSoup

from sktorrent.domain.entities.stremio import StremioContentType, TitleInfo
from sktorrent.infrastructure.common.converters import to_positive_int
from sktorrent.infrastructure.common.html_selectors import (
    extract_attr,
    extract_text,
    parse_html,
    select_items,
)

log = structlog.get_logger(__name__)

_TITLE_URL = "https://www.imdb.com/title/{imdb_id}/"
_EPISODES_URL = "https://www.imdb.com/title/{imdb_id}/episodes"

# IMDb serves a stripped page to clients without a browser User-Agent.
_BROWSER_HEADERS = {"User-Agent": "Mozilla/5.0"}

_EPISODE_ITEM_SELECTORS = (".list_item", ".ipc-episode")
_EPISODE_TITLE_SELECTORS = (
    "strong a",
    ".eplist-episode-title",
    ".episode-title",
    ".title a",
)


def _ld_json(soup: BeautifulSoup) -> dict[str, Any] | None:
    script = soup.select_one('script[type="application/ld+json"]')
    if script is None or not script.string:
        return None
    try:
        data = json.loads(script.string)
    except ValueError:
        log.debug("imdb_ld_json_invalid")
        return None
    return data if isinstance(data, dict) else None


def title_info_from_imdb_page(soup: BeautifulSoup) -> TitleInfo | None:
    """Build TitleInfo from a parsed IMDb title page.

    The display title is the ``<title>`` text before `` - ``; the original
    title is the ld+json ``name`` (or ``alternateName``) and falls back to
    the display title.
    """
    display = extract_text(soup, "title").split(" - ")[0].strip()
    if not display:
        return None

    original = display
    data = _ld_json(soup)
    if data is not None:
        alt = data.get("name") or data.get("alternateName")
        if isinstance(alt, str) and alt.strip():
            # ld+json strings keep HTML entities ("Schindler&apos;s List").
            original = html.unescape(alt).strip()

    return TitleInfo(display_title=display, original_title=original, source="imdb")


class ImdbClient:
    """Title resolver scraping imdb.com.

    Implements ``TitleProviderPort`` for ``tt`` identities.  The content
    type is not needed: IMDb title pages look the same for films and shows.
    """

    def __init__(self, *, http_client: httpx.AsyncClient) -> None:
        self._http = http_client

    async def _fetch_page(self, url: str, **params: Any) -> BeautifulSoup | None:
        try:
            resp = await self._http.get(url, params=params, headers=_BROWSER_HEADERS)
            resp.raise_for_status()
        except httpx.HTTPError:
            log.warning("imdb_fetch_failed", url=url, exc_info=True)
            return None
        return parse_html(resp.text)

    async def lookup_title(
        self, external_id: str, content_type: StremioContentType
    ) -> TitleInfo | None:
        soup = await self._fetch_page(_TITLE_URL.format(imdb_id=external_id))
        if soup is None:
            return None
        info = title_info_from_imdb_page(soup)
        if info is None:
            log.warning("imdb_title_missing", imdb_id=external_id)
            return None
        log.debug(
            "imdb_title_resolved",
            imdb_id=external_id,
            title=info.display_title,
            original_title=info.original_title,
        )
        return info

    async def lookup_episode_title(
        self, external_id: str, season: int, episode: int
    ) -> str | None:
        """Episode name from the season listing, or None."""
        soup = await self._fetch_page(
            _EPISODES_URL.format(imdb_id=external_id), season=season
        )
        if soup is None:
            return None

        for item in select_items(soup, ", ".join(_EPISODE_ITEM_SELECTORS)):
            number = to_positive_int(
                extract_attr(item, "[data-episode-number]", "data-episode-number")
            )
            if number != episode:
                continue
            title = extract_text(item, ", ".join(_EPISODE_TITLE_SELECTORS))
            if title:
                log.debug(
                    "imdb_episode_title_resolved",
                    imdb_id=external_id,
                    season=season,
                    episode=episode,
                    title=title,
                )
                return title
        return None
