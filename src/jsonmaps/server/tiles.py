"""Tile-archive (PMTiles v3) header and metadata reading over HTTP range requests."""

from __future__ import annotations

import gzip
import json
import logging
import struct
from abc import ABC, abstractmethod
from typing import Any, Literal

import httpx
from pydantic import BaseModel, Field

from jsonmaps.contracts.exceptions import DecodeError, FetchError
from jsonmaps.ingest._retrying_transport import RetryingTransport

_LOG = logging.getLogger(__name__)

HEADER_SIZE = 127
_MAGIC = b"PMTiles"
# magic, version, 11 offsets/counts, clustered, compressions, tile type,
# zoom range, bounds (e7), center zoom, center (e7)
_HEADER_FORMAT = "<7sB11Q6B4iB2i"

_COMPRESSION_NONE = 1
_COMPRESSION_GZIP = 2

TileType = Literal["vector", "raster", "unknown"]


class VectorLayerInfo(BaseModel):
    id: str
    fields: dict[str, str] = Field(default_factory=dict)


class TileArchiveMeta(BaseModel):
    tile_type: TileType = Field(alias="tileType")
    layers: list[VectorLayerInfo] = Field(default_factory=list)
    bounds: tuple[float, float, float, float] | None = None
    center: tuple[float, float] | None = None
    min_zoom: int = Field(alias="minZoom")
    max_zoom: int = Field(alias="maxZoom")

    model_config = {"frozen": True, "populate_by_name": True}


class TileArchiveReader(ABC):
    @abstractmethod
    async def read(self, url: str) -> TileArchiveMeta: ...  # pragma: no cover


def tile_type_name(code: int) -> TileType:
    if code == 1:
        return "vector"
    if code in (2, 3, 4, 5):
        return "raster"
    return "unknown"


def parse_header(data: bytes) -> dict[str, Any]:
    """Decode the fixed-size archive header.

    Raises:
        DecodeError: If *data* is short, has the wrong magic, or is not version 3.
    """
    if len(data) < HEADER_SIZE:
        raise DecodeError(f"tile archive header is {len(data)} bytes, expected {HEADER_SIZE}")
    fields = struct.unpack(_HEADER_FORMAT, data[:HEADER_SIZE])
    magic, version = fields[0], fields[1]
    if magic != _MAGIC:
        raise DecodeError("not a PMTiles archive")
    if version != 3:
        raise DecodeError(f"unsupported PMTiles version {version}")
    (
        _root_offset,
        _root_length,
        metadata_offset,
        metadata_length,
        _leaf_offset,
        _leaf_length,
        _data_offset,
        _data_length,
        _addressed,
        _entries,
        _contents,
    ) = fields[2:13]
    _clustered, internal_compression, _tile_compression, tile_type, min_zoom, max_zoom = fields[13:19]
    min_lon, min_lat, max_lon, max_lat = fields[19:23]
    _center_zoom, center_lon, center_lat = fields[23:26]
    return {
        "metadata_offset": metadata_offset,
        "metadata_length": metadata_length,
        "internal_compression": internal_compression,
        "tile_type": tile_type,
        "min_zoom": min_zoom,
        "max_zoom": max_zoom,
        "bounds": (min_lon / 1e7, min_lat / 1e7, max_lon / 1e7, max_lat / 1e7),
        "center": (center_lon / 1e7, center_lat / 1e7),
    }


def decode_metadata(data: bytes, compression: int) -> dict[str, Any]:
    if compression == _COMPRESSION_GZIP:
        try:
            data = gzip.decompress(data)
        except (OSError, EOFError) as exc:
            raise DecodeError("tile archive metadata is not valid gzip") from exc
    elif compression != _COMPRESSION_NONE:
        raise DecodeError(f"unsupported metadata compression {compression}")
    if not data:
        return {}
    try:
        payload = json.loads(data)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DecodeError("tile archive metadata is not JSON") from exc
    return payload if isinstance(payload, dict) else {}


def build_meta(header: dict[str, Any], metadata: dict[str, Any]) -> TileArchiveMeta:
    vector_layers = metadata.get("vector_layers")
    if not isinstance(vector_layers, list):
        tilestats = metadata.get("tilestats")
        vector_layers = tilestats.get("layers") if isinstance(tilestats, dict) else None
    layers = [
        VectorLayerInfo(
            id=str(entry.get("id", entry.get("layer", ""))),
            fields={str(k): str(v) for k, v in (entry.get("fields") or {}).items()},
        )
        for entry in vector_layers or []
        if isinstance(entry, dict)
    ]
    return TileArchiveMeta(
        tile_type=tile_type_name(header["tile_type"]),
        layers=layers,
        bounds=header["bounds"],
        center=header["center"],
        min_zoom=header["min_zoom"],
        max_zoom=header["max_zoom"],
    )


class HttpTileArchiveReader(TileArchiveReader):
    """Reads only the header and metadata block of a remote archive via ``Range`` requests."""

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        max_retries: int = 2,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._max_retries = max_retries
        self._transport = transport

    async def read(self, url: str) -> TileArchiveMeta:
        async with httpx.AsyncClient(
            transport=RetryingTransport(transport=self._transport, max_retries=self._max_retries),
            timeout=httpx.Timeout(self._timeout),
            follow_redirects=True,
        ) as client:
            header = parse_header(await self._read_range(client, url, 0, HEADER_SIZE))
            metadata: dict[str, Any] = {}
            if header["metadata_length"]:
                raw = await self._read_range(client, url, header["metadata_offset"], header["metadata_length"])
                metadata = decode_metadata(raw, header["internal_compression"])
        _LOG.debug("Read tile archive header for %s", url)
        return build_meta(header, metadata)

    async def _read_range(self, client: httpx.AsyncClient, url: str, offset: int, length: int) -> bytes:
        try:
            response = await client.get(url, headers={"Range": f"bytes={offset}-{offset + length - 1}"})
        except httpx.HTTPError as exc:
            raise FetchError(f"request failed: {exc}", url=url) from exc
        if response.status_code >= 400:
            raise FetchError(f"upstream returned {response.status_code}", url=url, status=response.status_code)
        body = response.content
        # servers ignoring Range send the whole file
        if response.status_code == 200 and len(body) > length:
            body = body[offset : offset + length]
        return body
