from .search_provider import SearchProviderPort
from .title_provider import TitleProviderPort
from .torrent_metadata import TorrentMetadataPort

__all__ = [
    "SearchProviderPort",
    "TitleProviderPort",
    "TorrentMetadataPort",
]
