"""Port for .torrent metadata retrieval."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from sktorrent.domain.entities.stremio import TorrentMetadata


@runtime_checkable
class TorrentMetadataPort(Protocol):
    async def resolve(self, fetch_url: str) -> TorrentMetadata:
        """Download and decode a .torrent.

        Raises:
            MetadataFetchFailed: transport error, timeout or bad status.
            MetadataDecodeFailed: payload is not a usable torrent.
        """
        ...
