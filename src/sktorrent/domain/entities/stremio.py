"""Domain entities for the Stremio stream resolver.

Pure value objects without framework dependencies or I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

StremioContentType = Literal["movie", "series"]
TitleSource = Literal["imdb", "tmdb"]


class IdentitySystem(str, Enum):
    """Catalog system an identifier belongs to."""

    IMDB = "imdb"
    TMDB = "tmdb"


@dataclass(frozen=True)
class MediaIdentity:
    """Parsed Stremio content identifier.

    Created from ids like ``tt1234567`` (movie), ``tt1234567:1:5``
    (series, season 1, episode 5) or ``tmdb:12345:1:5``.
    """

    system: IdentitySystem
    external_id: str
    season: int | None = None
    episode: int | None = None


@dataclass(frozen=True)
class TitleInfo:
    """Reference titles for building search queries."""

    display_title: str
    original_title: str
    source: TitleSource
    episode_title: str | None = None


@dataclass(frozen=True)
class SearchHit:
    """One row from the tracker's search listing."""

    raw_name: str
    external_id: str
    size_text: str
    seed_count: int
    category: str
    fetch_url: str


@dataclass(frozen=True)
class TorrentFile:
    """A member file of a torrent, in the order the torrent lists it."""

    name: str  # last path component, e.g. "Show.S01E02.mkv"
    size_bytes: int
    index: int


@dataclass(frozen=True)
class TorrentMetadata:
    """Decoded .torrent payload."""

    content_id: str  # 40 lowercase hex chars (SHA-1 of the raw info value)
    files: tuple[TorrentFile, ...] = field(default_factory=tuple)

    @property
    def is_multi_file(self) -> bool:
        return len(self.files) > 1


@dataclass(frozen=True)
class StreamCandidate:
    """A playable torrent (or torrent member file) ready for ranking."""

    display_title: str  # multi-line Stremio "title"
    group_key: str  # cleaned release name, used as bingeGroup
    content_id: str
    seed_count: int = 0
    file_index: int | None = None
    addon_name: str = ""  # Stremio "name", e.g. "SKTorrent\nFilmy"

    @property
    def dedup_key(self) -> tuple[str, int | None]:
        return (self.content_id, self.file_index)
