"""Convert tracker hits + torrent metadata into StreamCandidates.

Pure transformation logic, no I/O.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping

from sktorrent.domain.entities.stremio import (
    SearchHit,
    StreamCandidate,
    TorrentMetadata,
)
from sktorrent.domain.exceptions import NoQualifyingFiles
from sktorrent.infrastructure.stremio.episode_matcher import (
    MIN_VIDEO_SIZE_BYTES,
    VIDEO_EXTENSIONS,
    extract_episode_tag,
    match_episode,
    select_video_files,
)
from sktorrent.infrastructure.stremio.title_normalizer import clean_release_name

ADDON_LABEL = "SKTorrent"
SOURCE_SITE = "sktorrent.eu"

LANGUAGE_FLAGS: dict[str, str] = {
    "CZ": "🇨🇿",
    "SK": "🇸🇰",
    "EN": "🇬🇧",
    "US": "🇺🇸",
    "DE": "🇩🇪",
    "FR": "🇫🇷",
    "IT": "🇮🇹",
    "ES": "🇪🇸",
    "RU": "🇷🇺",
    "PL": "🇵🇱",
    "HU": "🇭🇺",
    "JP": "🇯🇵",
    "KR": "🇰🇷",
    "CN": "🇨🇳",
}

_LANG_CODE_RE = re.compile(r"\b([A-Z]{2})\b")


def language_flags(
    raw_name: str, flags: Mapping[str, str] = LANGUAGE_FLAGS
) -> list[str]:
    """Flag glyphs for 2-letter upper-case codes in a release name.

    ``"Dune 2021 CZ SK dabing"`` → ``["🇨🇿", "🇸🇰"]``.  Unknown codes are
    dropped; order and repeats follow the name.
    """
    return [
        flags[code] for code in _LANG_CODE_RE.findall(raw_name) if code in flags
    ]


def _flags_suffix(raw_name: str, flags: Mapping[str, str]) -> str:
    found = language_flags(raw_name, flags)
    return f"\n{' / '.join(found)}" if found else ""


def _addon_name(hit: SearchHit) -> str:
    return f"{ADDON_LABEL}\n{hit.category}"


def build_movie_candidate(
    hit: SearchHit,
    metadata: TorrentMetadata,
    *,
    flags: Mapping[str, str] = LANGUAGE_FLAGS,
) -> StreamCandidate:
    """One stream for a movie hit.

    A multi-file torrent points at its largest file so the player does not
    have to guess.
    """
    file_index = None
    if metadata.is_multi_file:
        file_index = max(metadata.files, key=lambda f: f.size_bytes).index
    group_key = clean_release_name(hit.raw_name, hit.category)
    display = (
        f"{group_key}\n👤 {hit.seed_count}  📀 {hit.size_text}  🩲 {SOURCE_SITE}"
        f"{_flags_suffix(hit.raw_name, flags)}"
    )
    return StreamCandidate(
        display_title=display,
        group_key=group_key,
        content_id=metadata.content_id,
        seed_count=hit.seed_count,
        file_index=file_index,
        addon_name=_addon_name(hit),
    )


def build_series_candidates(
    hit: SearchHit,
    metadata: TorrentMetadata,
    *,
    season: int | None = None,
    episode: int | None = None,
    extensions: Iterable[str] = VIDEO_EXTENSIONS,
    min_size_bytes: int = MIN_VIDEO_SIZE_BYTES,
    flags: Mapping[str, str] = LANGUAGE_FLAGS,
) -> list[StreamCandidate]:
    """Per-file streams for a series hit.

    With *season* and *episode* the single best-matching file is returned,
    otherwise every playable file.

    Raises:
        NoQualifyingFiles: the torrent holds no video file above the size floor.
    """
    videos = select_video_files(
        metadata.files, extensions=extensions, min_size_bytes=min_size_bytes
    )
    if not videos:
        raise NoQualifyingFiles(
            f"No playable files in {hit.raw_name!r} ({len(metadata.files)} files)"
        )

    if season is not None and episode is not None:
        chosen = match_episode(videos, season, episode)
        videos = [chosen] if chosen is not None else []

    group_key = clean_release_name(hit.raw_name, hit.category)
    flags_text = _flags_suffix(hit.raw_name, flags)

    candidates: list[StreamCandidate] = []
    for f in videos:
        tag = extract_episode_tag(f.name)
        label = f"{group_key} {tag}" if tag else group_key
        candidates.append(
            StreamCandidate(
                display_title=(
                    f"{label}\n🎞️ {f.name}\n👤 {hit.seed_count}  💽 {hit.size_text}"
                    f"{flags_text}"
                ),
                group_key=group_key,
                content_id=metadata.content_id,
                seed_count=hit.seed_count,
                file_index=f.index,
                addon_name=_addon_name(hit),
            )
        )
    return candidates
