"""Resolution pipeline exceptions.

None of these reach the Stremio client: the use case maps every one of
them to "fewer streams" (or an empty list).
"""

from __future__ import annotations


class ResolutionError(Exception):
    """Base class for all stream-resolution errors."""


class UnrecognizedIdentity(ResolutionError):
    """Raised when a Stremio id matches none of the known shapes."""


class LookupFailed(ResolutionError):
    """Raised when no title provider could resolve the identity."""


class SearchFailed(ResolutionError):
    """Raised when one tracker query fails (transport or listing parse)."""


class MetadataError(ResolutionError):
    """Base class for .torrent retrieval problems of a single hit."""


class MetadataFetchFailed(MetadataError):
    """Raised when the .torrent payload could not be downloaded."""


class MetadataDecodeFailed(MetadataError):
    """Raised when the payload is not a usable bencoded torrent."""


class NoQualifyingFiles(ResolutionError):
    """Raised when a torrent contains no playable video file."""
