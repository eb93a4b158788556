"""Geo-ingestion: fetch, decode and cache GeoParquet layer data."""

from __future__ import annotations

from typing import Any

from jsonmaps.contracts.config import JsonMapsConfig
from jsonmaps.ingest.cache import TableCache
from jsonmaps.ingest.fetch import TableFetcher
from jsonmaps.ingest.geoparquet import (
    decode_geoparquet,
    empty_feature_collection,
    geometry_to_geojson,
    resolve_geometry_column,
    to_json_value,
)


async def load_table(
    url: str,
    geometry_column: str | None = None,
    *,
    fetcher: TableFetcher | None = None,
) -> dict[str, Any]:
    """Fetch and decode one GeoParquet file without caching.

    Raises:
        FetchError: If neither the direct nor the proxied request succeeds.
        DecodeError: If the payload is not a readable Parquet file.
    """
    if fetcher is not None:
        return decode_geoparquet(await fetcher.fetch(url), geometry_column)
    async with TableFetcher.from_config(JsonMapsConfig()) as owned:
        return decode_geoparquet(await owned.fetch(url), geometry_column)


__all__ = [
    "TableCache",
    "TableFetcher",
    "decode_geoparquet",
    "empty_feature_collection",
    "geometry_to_geojson",
    "load_table",
    "resolve_geometry_column",
    "to_json_value",
]
