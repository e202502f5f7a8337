"""TMDB API client, async httpx implementation."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from sktorrent.domain.entities.stremio import StremioContentType, TitleInfo

log = structlog.get_logger(__name__)

_BASE_URL = "https://api.themoviedb.org/3"


def title_info_from_tmdb(data: dict[str, Any]) -> TitleInfo | None:
    """Build TitleInfo from a TMDB movie or tv detail payload.

    Movies carry ``title``/``original_title``, TV shows ``name``/
    ``original_name``.  Returns None when no title is present.
    """
    title = data.get("title") or data.get("name") or ""
    if not title:
        return None
    original = data.get("original_title") or data.get("original_name") or title
    return TitleInfo(display_title=title, original_title=original, source="tmdb")


class HttpxTmdbClient:
    """Async TMDB client using httpx.

    Implements ``TitleProviderPort`` for ``tmdb:`` identities.
    """

    def __init__(
        self,
        *,
        api_key: str,
        http_client: httpx.AsyncClient,
        language: str = "en-US",
    ) -> None:
        self._api_key = api_key
        self._http = http_client
        self._language = language

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _params(self, **extra: Any) -> dict[str, Any]:
        """Build query params with api_key and locale."""
        return {"api_key": self._api_key, "language": self._language, **extra}

    async def _get(self, path: str, **extra: Any) -> dict[str, Any] | None:
        """GET request with error handling. Returns parsed JSON or None."""
        url = f"{_BASE_URL}{path}"
        try:
            resp = await self._http.get(url, params=self._params(**extra))
            if resp.status_code == 401:
                log.error("tmdb_api_key_invalid", status=401)
                return None
            if resp.status_code == 404:
                log.debug("tmdb_resource_not_found", path=path)
                return None
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError:
            log.warning("tmdb_http_error", path=path, exc_info=True)
            return None
        except httpx.HTTPError:
            log.warning("tmdb_network_error", path=path, exc_info=True)
            return None
        except ValueError:
            log.warning("tmdb_invalid_json", path=path, exc_info=True)
            return None
        return data if isinstance(data, dict) else None

    # ------------------------------------------------------------------
    # Public API (TitleProviderPort)
    # ------------------------------------------------------------------

    async def lookup_title(
        self, external_id: str, content_type: StremioContentType
    ) -> TitleInfo | None:
        """Title and original title for a TMDB numeric id."""
        endpoint = "tv" if content_type == "series" else "movie"
        data = await self._get(f"/{endpoint}/{external_id}")
        if data is None:
            return None
        info = title_info_from_tmdb(data)
        if info is not None:
            log.debug(
                "tmdb_title_resolved",
                tmdb_id=external_id,
                title=info.display_title,
                original_title=info.original_title,
            )
        return info

    async def lookup_episode_title(
        self, external_id: str, season: int, episode: int
    ) -> str | None:
        """Episode name from ``/tv/{id}/season/{s}/episode/{e}``."""
        data = await self._get(f"/tv/{external_id}/season/{season}/episode/{episode}")
        if data is None:
            return None
        return data.get("name") or data.get("title") or None
