"""Download a .torrent from the tracker and decode its metadata.

The content id (info hash) is the SHA-1 of the ``info`` value exactly as
it appears in the payload.  Re-encoding the decoded dictionary would sort
its keys and change the digest for torrents written in another order, so
the raw byte span is located with a bencode length walk and hashed as-is.
``bencodepy`` decodes the file list.
"""

from __future__ import annotations

import hashlib
from collections.abc import Mapping
from typing import Any

import bencodepy
import httpx
import structlog

from sktorrent.domain.entities.stremio import TorrentFile, TorrentMetadata
from sktorrent.domain.exceptions import MetadataDecodeFailed, MetadataFetchFailed
from sktorrent.infrastructure.config.schema import SktorrentConfig

log = structlog.get_logger(__name__)

_DECODE_ERRORS = (
    bencodepy.BencodeDecodeError,
    ValueError,
    TypeError,
    KeyError,
    IndexError,
)


def _text(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def _path_parts(entry: Mapping[bytes, Any]) -> list[str]:
    raw = entry.get(b"path.utf-8") or entry.get(b"path")
    if not raw or not isinstance(raw, list):
        raise MetadataDecodeFailed("File entry without path list")
    return [_text(part) for part in raw]


def _length(entry: Mapping[bytes, Any]) -> int:
    length = entry.get(b"length", 0)
    if not isinstance(length, int) or length < 0:
        raise MetadataDecodeFailed(f"Invalid file length: {length!r}")
    return length


def _value_end(payload: bytes, pos: int) -> int:
    """Offset just past the bencoded value starting at *pos*."""
    head = payload[pos : pos + 1]
    if head == b"i":
        return payload.index(b"e", pos) + 1
    if head in (b"l", b"d"):
        pos += 1
        while payload[pos : pos + 1] != b"e":
            if head == b"d":
                pos = _value_end(payload, pos)  # key
            pos = _value_end(payload, pos)
        return pos + 1
    if head.isdigit():
        colon = payload.index(b":", pos)
        end = colon + 1 + int(payload[pos:colon])
        if end > len(payload):
            raise ValueError(f"String at offset {pos} runs past the payload")
        return end
    raise ValueError(f"Unexpected bencode token {head!r} at offset {pos}")


def raw_info_span(payload: bytes) -> bytes:
    """The ``info`` value of a torrent, byte for byte as encoded.

    Raises:
        ValueError: the root is not a dictionary or has no ``info`` key.
    """
    if payload[:1] != b"d":
        raise ValueError("Torrent root is not a dictionary")
    pos = 1
    while payload[pos : pos + 1] != b"e":
        key_end = _value_end(payload, pos)
        key = payload[payload.index(b":", pos) + 1 : key_end]
        value_end = _value_end(payload, key_end)
        if key == b"info":
            return payload[key_end:value_end]
        pos = value_end
    raise ValueError("Torrent has no info key")


def compute_content_id(payload: bytes) -> str:
    """Lowercase hex SHA-1 of the raw ``info`` value in *payload*."""
    return hashlib.sha1(raw_info_span(payload)).hexdigest()


def parse_torrent(payload: bytes) -> TorrentMetadata:
    """Decode a .torrent payload into :class:`TorrentMetadata`.

    Multi-file torrents list ``info.files`` in torrent order; a
    single-file torrent yields one entry with index 0.

    Raises:
        MetadataDecodeFailed: not bencode, no ``info`` dict or a malformed
            file list.
    """
    try:
        torrent = bencodepy.decode(payload)
    except _DECODE_ERRORS as exc:
        raise MetadataDecodeFailed(f"Payload is not bencoded: {exc}") from exc

    if not isinstance(torrent, Mapping):
        raise MetadataDecodeFailed("Torrent root is not a dictionary")
    info = torrent.get(b"info")
    if not isinstance(info, Mapping):
        raise MetadataDecodeFailed("Torrent has no info dictionary")

    try:
        content_id = compute_content_id(payload)
    except _DECODE_ERRORS as exc:
        raise MetadataDecodeFailed(f"Cannot locate info dict: {exc}") from exc

    name = _text(info.get(b"name.utf-8") or info.get(b"name") or b"")
    entries = info.get(b"files")

    if entries is None:
        files = (TorrentFile(name=name, size_bytes=_length(info), index=0),)
        return TorrentMetadata(content_id=content_id, files=files)

    if not isinstance(entries, list):
        raise MetadataDecodeFailed("info.files is not a list")

    parsed: list[TorrentFile] = []
    for idx, entry in enumerate(entries):
        if not isinstance(entry, Mapping):
            raise MetadataDecodeFailed(f"info.files[{idx}] is not a dictionary")
        parts = _path_parts(entry)
        parsed.append(
            TorrentFile(
                name=parts[-1],
                size_bytes=_length(entry),
                index=idx,
            )
        )
    return TorrentMetadata(content_id=content_id, files=tuple(parsed))


class SktorrentTorrentResolver:
    """Fetches .torrent payloads with the tracker session cookie.

    Implements ``TorrentMetadataPort``.
    """

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        config: SktorrentConfig,
    ) -> None:
        self._http = http_client
        self._headers = {
            "Cookie": config.cookie_header(),
            "Referer": config.base_url,
        }

    async def _fetch(self, fetch_url: str) -> bytes:
        try:
            resp = await self._http.get(fetch_url, headers=self._headers)
            resp.raise_for_status()
        except httpx.TimeoutException as exc:
            raise MetadataFetchFailed(f"Timeout fetching {fetch_url}") from exc
        except httpx.HTTPStatusError as exc:
            raise MetadataFetchFailed(
                f"HTTP {exc.response.status_code} fetching {fetch_url}"
            ) from exc
        except httpx.HTTPError as exc:
            raise MetadataFetchFailed(f"Error fetching {fetch_url}: {exc}") from exc
        return resp.content

    async def resolve(self, fetch_url: str) -> TorrentMetadata:
        """Download and decode one .torrent.

        Raises:
            MetadataFetchFailed: transport error, timeout or bad status.
            MetadataDecodeFailed: payload is not a usable torrent.
        """
        payload = await self._fetch(fetch_url)
        metadata = parse_torrent(payload)
        log.debug(
            "torrent_resolved",
            url=fetch_url,
            content_id=metadata.content_id,
            file_count=len(metadata.files),
        )
        return metadata
