from .stremio import (
    IdentitySystem,
    MediaIdentity,
    SearchHit,
    StreamCandidate,
    StremioContentType,
    TitleInfo,
    TitleSource,
    TorrentFile,
    TorrentMetadata,
)

__all__ = [
    "IdentitySystem",
    "MediaIdentity",
    "SearchHit",
    "StreamCandidate",
    "StremioContentType",
    "TitleInfo",
    "TitleSource",
    "TorrentFile",
    "TorrentMetadata",
]
