"""Shared test fixtures for the SKTorrent test suite."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import bencodepy
import pytest

from sktorrent.domain.entities.stremio import (
    SearchHit,
    StreamCandidate,
    TorrentFile,
    TorrentMetadata,
)

MiB = 1024 * 1024

# ---------------------------------------------------------------------------
# Domain entity fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def movie_hit() -> SearchHit:
    """A movie row as parsed from the tracker listing."""
    return SearchHit(
        raw_name="Stiahni si Filmy Dune 2021 CZ SK 1080p",
        external_id="111",
        size_text="12.3 GB",
        seed_count=42,
        category="Filmy",
        fetch_url="https://sktorrent.eu/torrent/download.php?id=111",
    )


@pytest.fixture()
def series_hit() -> SearchHit:
    """A season pack row as parsed from the tracker listing."""
    return SearchHit(
        raw_name="Stiahni si Seriály Dark S01 CZ",
        external_id="222",
        size_text="4 GB",
        seed_count=7,
        category="Seriály",
        fetch_url="https://sktorrent.eu/torrent/download.php?id=222",
    )


@pytest.fixture()
def season_metadata() -> TorrentMetadata:
    """Season pack with two episodes, a sample and a subtitle file."""
    return TorrentMetadata(
        content_id="a" * 40,
        files=(
            TorrentFile(name="Dark.S01E01.mkv", size_bytes=500 * MiB, index=0),
            TorrentFile(name="Dark.S01E02.mkv", size_bytes=500 * MiB, index=1),
            TorrentFile(name="sample.mkv", size_bytes=1 * MiB, index=2),
            TorrentFile(name="Dark.S01.srt", size_bytes=50 * MiB, index=3),
        ),
    )


@pytest.fixture()
def make_candidate() -> Callable[..., StreamCandidate]:
    """Factory for StreamCandidate with sensible defaults."""

    def _make(
        content_id: str = "a" * 40,
        *,
        seed_count: int = 0,
        file_index: int | None = None,
        display_title: str = "Some Release",
    ) -> StreamCandidate:
        return StreamCandidate(
            display_title=display_title,
            group_key="Some Release",
            content_id=content_id,
            seed_count=seed_count,
            file_index=file_index,
            addon_name="SKTorrent\nFilmy",
        )

    return _make


# ---------------------------------------------------------------------------
# .torrent payload fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_torrent() -> Callable[..., bytes]:
    """Build a bencoded .torrent payload.

    ``files`` is a list of ``(path_components, length)``; when omitted a
    single-file torrent of *length* bytes named *name* is produced.
    """

    def _make(
        name: str = "Dune.2021.1080p.mkv",
        *,
        length: int = 4 * 1024 * MiB,
        files: list[tuple[list[str], int]] | None = None,
    ) -> bytes:
        info: dict[bytes, Any] = {
            b"name": name.encode(),
            b"piece length": 262_144,
            b"pieces": b"\x01" * 20,
        }
        if files is None:
            info[b"length"] = length
        else:
            info[b"files"] = [
                {b"length": size, b"path": [part.encode() for part in parts]}
                for parts, size in files
            ]
        return bencodepy.encode(
            {b"announce": b"http://tracker.local/announce", b"info": info}
        )

    return _make
