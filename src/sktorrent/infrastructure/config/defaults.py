"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "sktorrent",
    "environment": "dev",
    "http": {
        "timeout_seconds": 15.0,
        "follow_redirects": True,
        "user_agent": "SKTorrent-Stremio/0.1.0",
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "sktorrent": {
        "base_url": "https://sktorrent.eu",
        "uid": "",
        "password": "",
    },
    "stremio": {
        "max_concurrent_fetches": 5,
        "fetch_timeout_seconds": 20.0,
        "min_video_size_mb": 20,
        "tmdb_language": "en-US",
    },
}
