"""Tests for the Stremio domain entities."""

from __future__ import annotations

import dataclasses

import pytest

from sktorrent.domain.entities.stremio import (
    IdentitySystem,
    MediaIdentity,
    StreamCandidate,
    TorrentFile,
    TorrentMetadata,
)
from sktorrent.domain.exceptions import (
    LookupFailed,
    MetadataDecodeFailed,
    MetadataError,
    MetadataFetchFailed,
    NoQualifyingFiles,
    ResolutionError,
    SearchFailed,
    UnrecognizedIdentity,
)


class TestMediaIdentity:
    def test_is_frozen(self) -> None:
        identity = MediaIdentity(IdentitySystem.TMDB, "999")
        with pytest.raises(dataclasses.FrozenInstanceError):
            identity.season = 3  # type: ignore[misc]

    def test_system_values(self) -> None:
        assert IdentitySystem.IMDB.value == "imdb"
        assert IdentitySystem.TMDB.value == "tmdb"


class TestTorrentMetadata:
    def test_single_file_is_not_multi(self) -> None:
        meta = TorrentMetadata(
            content_id="a" * 40,
            files=(TorrentFile(name="a.mkv", size_bytes=1, index=0),),
        )
        assert not meta.is_multi_file

    def test_two_files_is_multi(self) -> None:
        meta = TorrentMetadata(
            content_id="a" * 40,
            files=(
                TorrentFile(name="a.mkv", size_bytes=1, index=0),
                TorrentFile(name="b.mkv", size_bytes=1, index=1),
            ),
        )
        assert meta.is_multi_file


class TestStreamCandidate:
    def test_dedup_key(self) -> None:
        c = StreamCandidate(
            display_title="t", group_key="g", content_id="b" * 40, file_index=3
        )
        assert c.dedup_key == ("b" * 40, 3)

    def test_dedup_key_without_file_index(self) -> None:
        c = StreamCandidate(display_title="t", group_key="g", content_id="b" * 40)
        assert c.dedup_key == ("b" * 40, None)


class TestExceptionHierarchy:
    @pytest.mark.parametrize(
        "exc_type",
        [
            UnrecognizedIdentity,
            LookupFailed,
            SearchFailed,
            MetadataFetchFailed,
            MetadataDecodeFailed,
            NoQualifyingFiles,
        ],
    )
    def test_all_are_resolution_errors(self, exc_type: type[Exception]) -> None:
        assert issubclass(exc_type, ResolutionError)

    def test_metadata_errors_share_base(self) -> None:
        assert issubclass(MetadataFetchFailed, MetadataError)
        assert issubclass(MetadataDecodeFailed, MetadataError)
        assert not issubclass(NoQualifyingFiles, MetadataError)
