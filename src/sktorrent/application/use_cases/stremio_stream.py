"""Stremio stream resolution use case.

Stremio id -> titles (IMDb or TMDB) -> query variants -> first productive
tracker search -> parallel .torrent resolution -> candidates -> rank.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import replace
from typing import Protocol

import structlog

from sktorrent.domain.entities.stremio import (
    IdentitySystem,
    MediaIdentity,
    SearchHit,
    StreamCandidate,
    StremioContentType,
    TitleInfo,
    TorrentMetadata,
)
from sktorrent.domain.exceptions import (
    LookupFailed,
    MetadataError,
    NoQualifyingFiles,
    SearchFailed,
    UnrecognizedIdentity,
)
from sktorrent.domain.ports import (
    SearchProviderPort,
    TitleProviderPort,
    TorrentMetadataPort,
)

log = structlog.get_logger(__name__)


class _StremioConfig(Protocol):
    """Configuration values consumed by StremioStreamUseCase."""

    max_concurrent_fetches: int
    fetch_timeout_seconds: float

    @property
    def min_video_size_bytes(self) -> int: ...


class _StreamSorter(Protocol):
    """Deduplicates and orders candidates, best first."""

    def sort(self, candidates: list[StreamCandidate]) -> list[StreamCandidate]: ...


# Type aliases for injected pure functions.
_ParseIdFn = Callable[[str], MediaIdentity]
_QueriesFn = Callable[..., list[str]]
_MovieFn = Callable[[SearchHit, TorrentMetadata], StreamCandidate]
_SeriesFn = Callable[..., list[StreamCandidate]]
_SeasonPackFn = Callable[[str], bool]


class StremioStreamUseCase:
    """Resolve a Stremio stream request into ranked stream candidates.

    Flow:
        1. Parse the Stremio id (IMDb or TMDB, optional season/episode).
        2. Look up display/original title (and episode title) from the
           provider matching the id.
        3. Build query variants, most specific first.
        4. Search the tracker query by query; stop at the first query
           with any hits.
        5. Resolve every hit's .torrent concurrently (bounded) and turn
           it into candidates.
        6. Deduplicate and sort by seeders.

    Every failure degrades to fewer (or zero) streams; nothing is raised
    to the caller.
    """

    def __init__(
        self,
        *,
        imdb: TitleProviderPort,
        tmdb: TitleProviderPort | None,
        search: SearchProviderPort,
        resolver: TorrentMetadataPort,
        config: _StremioConfig,
        sorter: _StreamSorter,
        parse_id_fn: _ParseIdFn,
        queries_fn: _QueriesFn,
        movie_fn: _MovieFn,
        series_fn: _SeriesFn,
        season_pack_fn: _SeasonPackFn,
    ) -> None:
        self._imdb = imdb
        self._tmdb = tmdb
        self._search = search
        self._resolver = resolver
        self._sorter = sorter
        self._parse_id_fn = parse_id_fn
        self._queries_fn = queries_fn
        self._movie_fn = movie_fn
        self._series_fn = series_fn
        self._season_pack_fn = season_pack_fn
        self._max_concurrent = config.max_concurrent_fetches
        self._fetch_timeout = config.fetch_timeout_seconds
        self._min_video_size = config.min_video_size_bytes

    async def execute(
        self,
        content_type: StremioContentType,
        raw_id: str,
    ) -> list[StreamCandidate]:
        """Resolve streams for one Stremio request.

        Returns:
            Candidates sorted by seed count, best first.  Empty when the id
            is malformed, no title was found or nothing matched.
        """
        try:
            identity = self._parse_id_fn(raw_id)
        except UnrecognizedIdentity:
            log.warning("stremio_unrecognized_id", raw_id=raw_id)
            return []

        try:
            titles = await self._lookup_titles(identity, content_type)
        except LookupFailed as exc:
            log.warning(
                "stremio_title_lookup_failed",
                system=identity.system.value,
                external_id=identity.external_id,
                reason=str(exc),
            )
            return []

        is_series = content_type == "series"
        queries = self._queries_fn(
            titles,
            content_type,
            season=identity.season if is_series else None,
            episode=identity.episode if is_series else None,
        )

        log.info(
            "stremio_search_start",
            external_id=identity.external_id,
            content_type=content_type,
            season=identity.season,
            episode=identity.episode,
            title=titles.display_title,
            original_title=titles.original_title,
            query_count=len(queries),
        )

        hits = await self._first_productive_search(queries)
        if not hits:
            log.info(
                "stremio_search_no_results",
                external_id=identity.external_id,
                query_count=len(queries),
            )
            return []

        if not is_series:
            hits = self._drop_season_packs(hits)

        candidates = await self._resolve_hits(hits, content_type, identity)
        ranked = self._sorter.sort(candidates)

        log.info(
            "stremio_streams_resolved",
            external_id=identity.external_id,
            hit_count=len(hits),
            candidate_count=len(candidates),
            stream_count=len(ranked),
        )
        return ranked

    # ------------------------------------------------------------------
    # Title lookup
    # ------------------------------------------------------------------

    def _provider_for(self, identity: MediaIdentity) -> TitleProviderPort:
        if identity.system is IdentitySystem.IMDB:
            return self._imdb
        if self._tmdb is None:
            raise LookupFailed("TMDB id requested but no TMDB API key configured")
        return self._tmdb

    async def _lookup_titles(
        self,
        identity: MediaIdentity,
        content_type: StremioContentType,
    ) -> TitleInfo:
        """Titles from exactly one provider, chosen by the id's system.

        Raises:
            LookupFailed: provider missing, unreachable or without an entry.
        """
        provider = self._provider_for(identity)
        titles = await provider.lookup_title(identity.external_id, content_type)
        if titles is None:
            raise LookupFailed(
                f"No title for {identity.system.value}:{identity.external_id}"
            )

        season, episode = identity.season, identity.episode
        if content_type == "series" and season is not None and episode is not None:
            episode_title = await provider.lookup_episode_title(
                identity.external_id, season, episode
            )
            if episode_title:
                titles = replace(titles, episode_title=episode_title)
        return titles

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def _first_productive_search(self, queries: list[str]) -> list[SearchHit]:
        """Try queries in order; return the hits of the first non-empty one."""
        for query in queries:
            try:
                hits = await self._search.search(query)
            except SearchFailed:
                log.warning("stremio_query_failed", query=query, exc_info=True)
                continue
            if hits:
                log.info("stremio_query_matched", query=query, hit_count=len(hits))
                return hits
        return []

    def _drop_season_packs(self, hits: list[SearchHit]) -> list[SearchHit]:
        kept: list[SearchHit] = []
        for hit in hits:
            if self._season_pack_fn(hit.raw_name):
                log.debug("stremio_season_pack_skipped", name=hit.raw_name)
                continue
            kept.append(hit)
        return kept

    # ------------------------------------------------------------------
    # Per-hit resolution
    # ------------------------------------------------------------------

    async def _resolve_hits(
        self,
        hits: list[SearchHit],
        content_type: StremioContentType,
        identity: MediaIdentity,
    ) -> list[StreamCandidate]:
        """Resolve all hits in parallel with bounded concurrency.

        Results are concatenated in hit order regardless of completion order.
        """
        semaphore = asyncio.Semaphore(self._max_concurrent)

        async def _resolve_one(hit: SearchHit) -> list[StreamCandidate]:
            async with semaphore:
                try:
                    return await asyncio.wait_for(
                        self._resolve_hit(hit, content_type, identity),
                        timeout=self._fetch_timeout,
                    )
                except TimeoutError:
                    log.warning(
                        "stremio_hit_timeout",
                        name=hit.raw_name,
                        timeout=self._fetch_timeout,
                    )
                    return []

        per_hit = await asyncio.gather(*(_resolve_one(hit) for hit in hits))

        candidates: list[StreamCandidate] = []
        for result in per_hit:
            candidates.extend(result)
        return candidates

    async def _resolve_hit(
        self,
        hit: SearchHit,
        content_type: StremioContentType,
        identity: MediaIdentity,
    ) -> list[StreamCandidate]:
        """Fetch one .torrent and build its candidates; failures yield []."""
        try:
            metadata = await self._resolver.resolve(hit.fetch_url)
            if content_type == "movie":
                return [self._movie_fn(hit, metadata)]
            return self._series_fn(
                hit,
                metadata,
                season=identity.season,
                episode=identity.episode,
                min_size_bytes=self._min_video_size,
            )
        except MetadataError as exc:
            log.warning(
                "stremio_metadata_failed",
                name=hit.raw_name,
                url=hit.fetch_url,
                error_type=type(exc).__name__,
                reason=str(exc),
            )
        except NoQualifyingFiles:
            log.debug("stremio_no_video_files", name=hit.raw_name)
        except Exception:
            log.warning(
                "stremio_hit_failed",
                name=hit.raw_name,
                url=hit.fetch_url,
                exc_info=True,
            )
        return []
