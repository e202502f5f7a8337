"""Port for title metadata lookups (IMDb, TMDB)."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from sktorrent.domain.entities.stremio import StremioContentType, TitleInfo


@runtime_checkable
class TitleProviderPort(Protocol):
    """Async interface implemented by both title providers."""

    async def lookup_title(
        self, external_id: str, content_type: StremioContentType
    ) -> TitleInfo | None:
        """Resolve display and original title.

        Returns None when the provider is unreachable or has no entry.
        """
        ...

    async def lookup_episode_title(
        self, external_id: str, season: int, episode: int
    ) -> str | None:
        """Resolve the name of a single episode, or None."""
        ...
