"""File selection inside multi-file torrents.

Season packs on the tracker are inconsistently tagged: some use
``S01E02``, others ``1x02``, ``Ep 2``, a bare daily number or nothing at
all.  Matching is therefore an ordered cascade of filename predicates,
evaluated level by level over all files; the first file that satisfies
the most specific satisfiable level wins.

Pure transformation logic, no I/O.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

import structlog

from sktorrent.domain.entities.stremio import TorrentFile

log = structlog.get_logger(__name__)

VIDEO_EXTENSIONS: tuple[str, ...] = (
    ".mp4",
    ".mkv",
    ".avi",
    ".mov",
    ".webm",
    ".mpeg",
    ".mpg",
    ".ts",
    ".flv",
)
MIN_VIDEO_SIZE_BYTES = 20 * 1024 * 1024

# Tag extraction for display, tried in order.
_EPISODE_TAG_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"S?0?(\d+)[ ._\-xX]?E?0?(\d+)", re.IGNORECASE),
    re.compile(r"\b(\d{3,4})\b"),
    re.compile(r"\bE0?(\d+)\b", re.IGNORECASE),
)


@dataclass(frozen=True)
class MatchStrategy:
    """One level of the episode cascade: a named filename predicate."""

    name: str
    matches: Callable[[str], bool]


def _regex_strategy(name: str, pattern: str) -> MatchStrategy:
    compiled = re.compile(pattern, re.IGNORECASE)
    return MatchStrategy(name=name, matches=lambda text: bool(compiled.search(text)))


def build_match_cascade(season: int, episode: int) -> tuple[MatchStrategy, ...]:
    """Matchers for *season*/*episode*, most specific first."""
    return (
        _regex_strategy("exact_tag", rf"S{season:02d}E{episode:02d}"),
        _regex_strategy("loose_tag", rf"S?0?{season}[ ._\-xX]?E?0?{episode}"),
        _regex_strategy("ep_prefix", rf"\bEp?\.?\s*0?{episode}\b"),
        _regex_strategy("spaced_number", rf"\b\s{episode}\b"),
        _regex_strategy("bare_number", rf"\b{episode}\b"),
    )


def is_video_file(
    file: TorrentFile,
    *,
    extensions: Iterable[str] = VIDEO_EXTENSIONS,
    min_size_bytes: int = MIN_VIDEO_SIZE_BYTES,
) -> bool:
    """Video extension and larger than the sample/subtitle floor."""
    name = file.name.lower()
    return (
        any(name.endswith(ext) for ext in extensions)
        and file.size_bytes > min_size_bytes
    )


def select_video_files(
    files: Iterable[TorrentFile],
    *,
    extensions: Iterable[str] = VIDEO_EXTENSIONS,
    min_size_bytes: int = MIN_VIDEO_SIZE_BYTES,
) -> list[TorrentFile]:
    """Keep playable files, preserving torrent order."""
    exts = tuple(extensions)
    return [
        f
        for f in files
        if is_video_file(f, extensions=exts, min_size_bytes=min_size_bytes)
    ]


def extract_episode_tag(filename: str) -> str | None:
    """Best-effort episode label from a filename (``"S01E02"``, ``"3521"``)."""
    for pattern in _EPISODE_TAG_PATTERNS:
        m = pattern.search(filename)
        if m:
            return m.group(0).upper()
    return None


def match_episode(
    files: Sequence[TorrentFile],
    season: int,
    episode: int,
) -> TorrentFile | None:
    """Pick the file for *season*/*episode* from already-filtered video files.

    Falls back to the first file when nothing matches, so a poorly tagged
    release still plays.  Returns None only for an empty input.
    """
    if not files:
        return None

    for strategy in build_match_cascade(season, episode):
        for f in files:
            if strategy.matches(f.name):
                log.debug(
                    "episode_matched",
                    strategy=strategy.name,
                    file=f.name,
                    season=season,
                    episode=episode,
                )
                return f

    log.debug(
        "episode_match_fallback",
        file=files[0].name,
        season=season,
        episode=episode,
    )
    return files[0]
