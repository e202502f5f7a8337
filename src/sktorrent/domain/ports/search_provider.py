"""Port for tracker search."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from sktorrent.domain.entities.stremio import SearchHit


@runtime_checkable
class SearchProviderPort(Protocol):
    async def search(self, query: str) -> list[SearchHit]:
        """Run one query. Never raises; failures yield an empty list."""
        ...
