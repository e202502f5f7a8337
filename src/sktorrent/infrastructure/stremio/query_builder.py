"""Search query generation for the tracker.

The tracker does plain substring matching (no stemming, no transliteration),
so one title has to be tried in several spellings: with and without
diacritics, dotted like scene releases, shortened, and with different
episode tag styles.  Queries are ordered most-specific first; the caller
stops at the first query that returns anything.
"""

from __future__ import annotations

import re

from sktorrent.domain.entities.stremio import StremioContentType, TitleInfo
from sktorrent.infrastructure.stremio.title_normalizer import (
    clean,
    normalize_key,
    shorten,
    strip_diacritics,
)

_WHITESPACE_RE = re.compile(r"\s+")
_QUOTE_COLON_RE = re.compile(r"[':]")


def _dotted(text: str) -> str:
    return _WHITESPACE_RE.sub(".", text)


def is_daily_numbering(season: int, episode: int) -> bool:
    """Soap operas numbered by broadcast day (``Ulice 3521``) instead of SxxEyy."""
    return (season == 1 and episode > 100) or episode > 1000


def _base_titles(titles: TitleInfo) -> list[str]:
    cleaned = [clean(titles.display_title), clean(titles.original_title)]
    return list(dict.fromkeys(t for t in cleaned if t))


def _episode_variants(
    base: str,
    season: int,
    episode: int,
    episode_title: str | None,
) -> list[str]:
    no_dia = strip_diacritics(base)
    short = shorten(no_dia)
    ep_tag = f"S{season:02d}E{episode:02d}"

    if is_daily_numbering(season, episode):
        variants = [
            f"{base} {episode}",
            f"{base} ep{episode}",
            f"{base} e{episode}",
            f"{no_dia} {episode}",
            f"{short} {episode}",
        ]
    else:
        variants = [
            f"{base} {ep_tag}",
            f"{base} E{episode}",
            f"{base} Ep{episode}",
            f"{base} {season}x{episode}",
            f"{base} {season}.{episode}",
            f"{no_dia} {ep_tag}",
            f"{normalize_key(base)}{ep_tag}",
            f"{no_dia} E{episode}",
            f"{short} E{episode}",
        ]

    if episode_title:
        variants += [
            f"{base} {episode_title}",
            f"{no_dia} {episode_title}",
            f"{short} {episode_title}",
        ]
    return variants


def _season_pack_variants(base: str, season: int) -> list[str]:
    return [
        f"{base} S{season:02d}",
        f"{base} Season {season}",
        f"{base} Season {season} Complete",
        f"{base} Complete",
        f"{base} All Episodes",
    ]


def build_search_queries(
    titles: TitleInfo,
    content_type: StremioContentType,
    *,
    season: int | None = None,
    episode: int | None = None,
) -> list[str]:
    """Build the ordered, duplicate-free list of tracker queries.

    Movies try the plain, diacritic-free and dotted title.  Series without
    an episode look for complete packs.  Series episodes try every tag
    style, then fall back to season packs which can still contain the
    requested episode.
    """
    queries: dict[str, None] = {}

    def add(*items: str) -> None:
        for item in items:
            if item:
                queries.setdefault(item, None)

    bases = _base_titles(titles)

    if content_type == "series" and season is not None and episode is not None:
        for base in bases:
            for variant in _episode_variants(
                base, season, episode, titles.episode_title
            ):
                add(variant, _QUOTE_COLON_RE.sub("", variant), _dotted(variant))
        for base in bases:
            for variant in _season_pack_variants(base, season):
                add(variant, _dotted(variant))
    elif content_type == "series":
        for base in bases:
            no_dia = strip_diacritics(base)
            add(
                f"{base} Complete",
                f"{base} All Episodes",
                f"{base} Season",
                f"{no_dia} Season",
                _dotted(base),
            )
    else:
        for base in bases:
            add(base, strip_diacritics(base), _dotted(base))

    return list(queries)
