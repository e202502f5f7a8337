"""Tests for the Stremio addon endpoints."""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from sktorrent.domain.entities.stremio import StreamCandidate
from sktorrent.infrastructure.config import AppConfig
from sktorrent.interfaces.api.stremio.router import (
    build_manifest,
    format_stremio_stream,
)
from sktorrent.interfaces.app import create_app

_Make = Callable[..., StreamCandidate]


def _make_client(
    candidates: list[StreamCandidate] | None = None,
) -> tuple[TestClient, AsyncMock]:
    """App with a mocked use case; lifespan is not entered."""
    app = create_app(AppConfig())
    use_case = AsyncMock()
    use_case.execute.return_value = candidates or []
    app.state.stremio_stream_uc = use_case
    return TestClient(app), use_case


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------


class TestManifest:
    def test_build_manifest(self) -> None:
        manifest = build_manifest()
        assert manifest["id"] == "org.stremio.sktorrent"
        assert manifest["types"] == ["movie", "series"]
        assert manifest["resources"] == ["stream"]
        assert manifest["idPrefixes"] == ["tt", "tmdb:"]
        assert [c["id"] for c in manifest["catalogs"]] == [
            "sktorrent-movie",
            "sktorrent-series",
        ]

    def test_endpoint_with_cors(self) -> None:
        client, _ = _make_client()
        resp = client.get("/manifest.json")
        assert resp.status_code == 200
        assert resp.json()["name"] == "SKTorrent"
        assert resp.headers["access-control-allow-origin"] == "*"


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class TestCatalog:
    @pytest.mark.parametrize(
        "path", ["/catalog/movie/sktorrent-movie.json", "/catalog/series/x.json"]
    )
    def test_always_empty(self, path: str) -> None:
        client, use_case = _make_client()
        resp = client.get(path)
        assert resp.status_code == 200
        assert resp.json() == {"metas": []}
        use_case.execute.assert_not_awaited()


# ---------------------------------------------------------------------------
# Stream formatting
# ---------------------------------------------------------------------------


class TestFormatStremioStream:
    def test_movie_without_file_idx(self, make_candidate: _Make) -> None:
        stream = format_stremio_stream(make_candidate("a" * 40, seed_count=3))
        assert stream == {
            "title": "Some Release",
            "name": "SKTorrent\nFilmy",
            "behaviorHints": {"bingeGroup": "Some Release"},
            "infoHash": "a" * 40,
        }

    def test_file_idx_present(self, make_candidate: _Make) -> None:
        stream = format_stremio_stream(make_candidate(file_index=0))
        assert stream["fileIdx"] == 0


# ---------------------------------------------------------------------------
# Stream endpoint
# ---------------------------------------------------------------------------


class TestStreamEndpoint:
    def test_series_episode(self, make_candidate: _Make) -> None:
        candidate = make_candidate("b" * 40, file_index=4, seed_count=9)
        client, use_case = _make_client([candidate])

        resp = client.get("/stream/series/tt5753856:1:2.json")

        assert resp.status_code == 200
        streams = resp.json()["streams"]
        assert len(streams) == 1
        assert streams[0]["infoHash"] == "b" * 40
        assert streams[0]["fileIdx"] == 4
        assert resp.headers["access-control-allow-origin"] == "*"
        use_case.execute.assert_awaited_once_with("series", "tt5753856:1:2")

    def test_order_is_preserved(self, make_candidate: _Make) -> None:
        first = make_candidate("1" * 40, seed_count=50)
        second = make_candidate("2" * 40, seed_count=5)
        client, _ = _make_client([first, second])

        streams = client.get("/stream/movie/tt1160419.json").json()["streams"]

        assert [s["infoHash"] for s in streams] == ["1" * 40, "2" * 40]

    def test_tmdb_id(self) -> None:
        client, use_case = _make_client()
        resp = client.get("/stream/movie/tmdb:603.json")
        assert resp.json() == {"streams": []}
        use_case.execute.assert_awaited_once_with("movie", "tmdb:603")

    def test_unsupported_type(self) -> None:
        client, use_case = _make_client()
        resp = client.get("/stream/channel/tt1.json")
        assert resp.status_code == 200
        assert resp.json() == {"streams": []}
        use_case.execute.assert_not_awaited()
