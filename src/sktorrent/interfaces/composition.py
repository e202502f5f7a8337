"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from sktorrent.application.use_cases.stremio_stream import StremioStreamUseCase
from sktorrent.infrastructure.config.schema import AppConfig
from sktorrent.infrastructure.metadata.imdb_client import ImdbClient
from sktorrent.infrastructure.metadata.tmdb_client import HttpxTmdbClient
from sktorrent.infrastructure.sktorrent.search_client import SktorrentSearchClient
from sktorrent.infrastructure.sktorrent.torrent_resolver import (
    SktorrentTorrentResolver,
)
from sktorrent.infrastructure.stremio.identity_parser import parse_identity
from sktorrent.infrastructure.stremio.query_builder import build_search_queries
from sktorrent.infrastructure.stremio.stream_converter import (
    build_movie_candidate,
    build_series_candidates,
)
from sktorrent.infrastructure.stremio.stream_sorter import StreamSorter
from sktorrent.infrastructure.stremio.title_normalizer import is_multi_season_pack
from sktorrent.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


def build_http_client(config: AppConfig) -> httpx.AsyncClient:
    """Shared client for every outbound request (tracker, IMDb, TMDB)."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
        follow_redirects=config.http_follow_redirects,
    )


def build_stream_use_case(
    config: AppConfig, http_client: httpx.AsyncClient
) -> StremioStreamUseCase:
    """Wire adapters and pure functions into the stream use case."""
    tmdb: HttpxTmdbClient | None = None
    if config.tmdb_api_key is not None:
        tmdb = HttpxTmdbClient(
            api_key=config.tmdb_api_key.get_secret_value(),
            http_client=http_client,
            language=config.stremio.tmdb_language,
        )
    else:
        log.warning("tmdb_api_key_missing", hint="tmdb: ids will return no streams")

    if not config.sktorrent.uid:
        log.warning("sktorrent_credentials_missing")

    return StremioStreamUseCase(
        imdb=ImdbClient(http_client=http_client),
        tmdb=tmdb,
        search=SktorrentSearchClient(http_client=http_client, config=config.sktorrent),
        resolver=SktorrentTorrentResolver(
            http_client=http_client, config=config.sktorrent
        ),
        config=config.stremio,
        sorter=StreamSorter(),
        parse_id_fn=parse_identity,
        queries_fn=build_search_queries,
        movie_fn=build_movie_candidate,
        series_fn=build_series_candidates,
        season_pack_fn=is_multi_season_pack,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: Initialize and cleanup all resources (DI Composition Root).

    Order matters:
        1. HTTP Client (required by every adapter)
        2. Stream use case (adapters + pure pipeline functions)
    """
    state = cast(AppState, app.state)
    config = state.config

    # 1) HTTP client
    state.http_client = build_http_client(config)
    log.info(
        "http_client_initialized",
        timeout_seconds=config.http_timeout_seconds,
        follow_redirects=config.http_follow_redirects,
    )

    # 2) Stremio stream use case
    state.stremio_stream_uc = build_stream_use_case(config, state.http_client)

    log.info(
        "app_startup_complete",
        max_concurrent_fetches=config.stremio.max_concurrent_fetches,
        tmdb_enabled=config.tmdb_api_key is not None,
    )

    try:
        yield
    finally:
        await state.http_client.aclose()
        log.info("http_client_closed")

        log.info("app_shutdown_complete")
