"""HTTP API: fetch proxy and tile-archive metadata."""

from jsonmaps.server.app import create_app, router
from jsonmaps.server.tiles import HttpTileArchiveReader, TileArchiveMeta, TileArchiveReader, VectorLayerInfo

__all__ = [
    "HttpTileArchiveReader",
    "TileArchiveMeta",
    "TileArchiveReader",
    "VectorLayerInfo",
    "create_app",
    "router",
]
