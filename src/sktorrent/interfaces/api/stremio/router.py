"""Stremio addon API endpoints (manifest, catalog, stream)."""

from __future__ import annotations

from typing import Any, cast

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from sktorrent.domain.entities.stremio import StreamCandidate, StremioContentType
from sktorrent.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["stremio"])

_ADDON_ID = "org.stremio.sktorrent"
_ADDON_VERSION = "1.0.0"
_CONTENT_TYPES: tuple[str, ...] = ("movie", "series")

_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "*",
}


def build_manifest() -> dict[str, Any]:
    """Build the Stremio addon manifest."""
    return {
        "id": _ADDON_ID,
        "version": _ADDON_VERSION,
        "name": "SKTorrent",
        "description": (
            "Streams torrents from SKTorrent.eu (movies and series with "
            "season-pack episode matching, IMDb and TMDB ids)"
        ),
        "types": list(_CONTENT_TYPES),
        "catalogs": [
            {"type": "movie", "id": "sktorrent-movie", "name": "SKTorrent Filmy"},
            {"type": "series", "id": "sktorrent-series", "name": "SKTorrent Seriály"},
        ],
        "resources": ["stream"],
        "idPrefixes": ["tt", "tmdb:"],
    }


def format_stremio_stream(candidate: StreamCandidate) -> dict[str, Any]:
    """Convert a StreamCandidate to Stremio JSON format.

    ``fileIdx`` is only present for streams pointing into a multi-file
    torrent.
    """
    stream: dict[str, Any] = {
        "title": candidate.display_title,
        "name": candidate.addon_name,
        "behaviorHints": {"bingeGroup": candidate.group_key},
        "infoHash": candidate.content_id,
    }
    if candidate.file_index is not None:
        stream["fileIdx"] = candidate.file_index
    return stream


@router.get("/manifest.json")
async def stremio_manifest() -> JSONResponse:
    """Serve the Stremio addon manifest."""
    return JSONResponse(content=build_manifest(), headers=_CORS_HEADERS)


@router.get("/catalog/{content_type}/{catalog_id}.json")
async def stremio_catalog(content_type: str, catalog_id: str) -> JSONResponse:
    """Catalogs exist only so Stremio lists the addon; they are always empty."""
    log.debug(
        "stremio_catalog_request", content_type=content_type, catalog_id=catalog_id
    )
    return JSONResponse(content={"metas": []}, headers=_CORS_HEADERS)


@router.get("/stream/{content_type}/{stream_id}.json")
async def stremio_stream(
    request: Request,
    content_type: str,
    stream_id: str,
) -> JSONResponse:
    """Resolve streams for a movie or episode."""
    state = cast(AppState, request.app.state)

    if content_type not in _CONTENT_TYPES:
        log.debug("stremio_unsupported_type", content_type=content_type)
        return JSONResponse(content={"streams": []}, headers=_CORS_HEADERS)

    log.info("stremio_stream_request", content_type=content_type, stream_id=stream_id)

    candidates = await state.stremio_stream_uc.execute(
        cast(StremioContentType, content_type), stream_id
    )
    streams = [format_stremio_stream(c) for c in candidates]
    return JSONResponse(content={"streams": streams}, headers=_CORS_HEADERS)
