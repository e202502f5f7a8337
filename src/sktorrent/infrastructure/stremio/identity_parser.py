"""Stremio id parsing.

Accepted shapes (first match wins):

- ``tt1234567`` / ``tt1234567:1:5``
- ``tmdb:12345`` / ``tmdb:12345:1:5``
- ``movie:tmdb:12345`` / ``series:tmdb:12345:1:5``
- ``movie:tt1234567`` / ``series:tt1234567:1:5``
"""

from __future__ import annotations

import re

from sktorrent.domain.entities.stremio import IdentitySystem, MediaIdentity
from sktorrent.domain.exceptions import UnrecognizedIdentity
from sktorrent.infrastructure.common.converters import to_positive_int

_IMDB_ID_RE = re.compile(r"^tt\d+$")
_TYPE_PREFIXES = ("movie", "series")


def _build(
    system: IdentitySystem, external_id: str, rest: list[str]
) -> MediaIdentity:
    season = to_positive_int(rest[0]) if len(rest) > 0 else None
    episode = to_positive_int(rest[1]) if len(rest) > 1 else None
    return MediaIdentity(
        system=system,
        external_id=external_id,
        season=season,
        episode=episode,
    )


def parse_identity(raw_id: str) -> MediaIdentity:
    """Decode a colon-delimited Stremio id into a MediaIdentity.

    Season/episode that are not positive integers are treated as absent.

    Raises:
        UnrecognizedIdentity: when no known shape matches.
    """
    parts = raw_id.strip().split(":")
    head = parts[0]

    if _IMDB_ID_RE.match(head):
        return _build(IdentitySystem.IMDB, head, parts[1:])

    if head == "tmdb" and len(parts) > 1 and parts[1]:
        return _build(IdentitySystem.TMDB, parts[1], parts[2:])

    if head in _TYPE_PREFIXES and len(parts) > 2 and parts[1] == "tmdb" and parts[2]:
        return _build(IdentitySystem.TMDB, parts[2], parts[3:])

    if head in _TYPE_PREFIXES and len(parts) > 1 and _IMDB_ID_RE.match(parts[1]):
        return _build(IdentitySystem.IMDB, parts[1], parts[2:])

    raise UnrecognizedIdentity(f"Unrecognized Stremio id: {raw_id!r}")
