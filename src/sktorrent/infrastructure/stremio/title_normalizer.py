"""Title string transforms used for query building and release cleanup.

Pure functions, no I/O.
"""

from __future__ import annotations

import re
import unicodedata

# "S01E01-12", "Complete", "All Episodes", "Season 2", "Season 1-3"
_MULTI_SEASON_RE = re.compile(
    r"S\d{2}E\d{2}-\d{2}|Complete|All Episodes|Season \d+(?:-\d+)?",
    re.IGNORECASE,
)
_PARENTHESES_RE = re.compile(r"\(.*?\)")
_TV_SERIES_RE = re.compile(r"TV (?:Mini )?Series", re.IGNORECASE)
_KEY_STRIP_RE = re.compile(r"[\s:']")

# Tracker prefixes every tooltip with "Stiahni si" ("download this").
_DOWNLOAD_PREFIX_RE = re.compile(r"^Stiahni si\s*", re.IGNORECASE)


def strip_diacritics(text: str) -> str:
    """Decompose (NFD) and drop combining marks: ``Útěk`` → ``Utek``."""
    if not text:
        return text
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def shorten(text: str, word_count: int = 3) -> str:
    """Keep the first *word_count* whitespace-delimited tokens."""
    if not text:
        return text
    return " ".join(text.split()[:word_count])


def normalize_key(text: str) -> str:
    """Compact matching key: no diacritics, whitespace, colons or apostrophes."""
    if not text:
        return text
    return _KEY_STRIP_RE.sub("", strip_diacritics(text)).lower()


def is_multi_season_pack(raw_name: str) -> bool:
    """True when a release name looks like a season or series pack."""
    return bool(_MULTI_SEASON_RE.search(raw_name or ""))


def clean(title: str) -> str:
    """Drop parenthetical notes and "TV (Mini) Series" suffixes.

    ``"Chernobyl (TV Mini Series 2019)"`` → ``"Chernobyl"``.
    """
    if not title:
        return title
    text = _PARENTHESES_RE.sub("", title)
    text = _TV_SERIES_RE.sub("", text)
    return text.strip()


def clean_release_name(raw_name: str, category: str = "") -> str:
    """Strip the tooltip's download prefix and a leading category echo.

    ``"Stiahni si Filmy Dune 2021 CZ"`` with category ``"Filmy"``
    → ``"Dune 2021 CZ"``.
    """
    cleaned = _DOWNLOAD_PREFIX_RE.sub("", raw_name or "").strip()
    prefix = category.strip()
    if prefix and cleaned.lower().startswith(prefix.lower()):
        cleaned = cleaned[len(prefix) :].strip()
    return cleaned
