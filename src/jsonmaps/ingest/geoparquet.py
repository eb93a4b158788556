"""GeoParquet decoding into GeoJSON feature collections."""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any

import pyarrow as pa
import pyarrow.parquet as pq
import shapely.wkb
import shapely.wkt
from shapely.errors import ShapelyError
from shapely.geometry import mapping

from jsonmaps.contracts.exceptions import DecodeError

_LOG = logging.getLogger(__name__)

DEFAULT_GEOMETRY_COLUMN = "geometry"
GEO_METADATA_KEY = b"geo"
MAX_SAFE_INTEGER = 2**53


def empty_feature_collection() -> dict[str, Any]:
    return {"type": "FeatureCollection", "features": []}


def resolve_geometry_column(metadata: Mapping[bytes, bytes] | None, hint: str | None = None) -> str:
    """Pick the geometry column: *hint*, then ``geo`` metadata, then ``"geometry"``.

    Malformed ``geo`` metadata is ignored.
    """
    if hint:
        return hint
    raw = (metadata or {}).get(GEO_METADATA_KEY)
    if raw:
        try:
            geo = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            _LOG.debug("Ignoring malformed geo metadata: %s", exc)
            geo = None
        if isinstance(geo, dict):
            primary = geo.get("primary_column")
            if isinstance(primary, str) and primary:
                return primary
            columns = geo.get("columns")
            if isinstance(columns, dict) and columns:
                return str(next(iter(columns)))
    return DEFAULT_GEOMETRY_COLUMN


def _json_native(value: Any) -> Any:
    if isinstance(value, tuple):
        return [_json_native(item) for item in value]
    if isinstance(value, list):
        return [_json_native(item) for item in value]
    if isinstance(value, dict):
        return {key: _json_native(item) for key, item in value.items()}
    return value


def geometry_to_geojson(value: Any) -> dict[str, Any] | None:
    """Decode a WKB, WKT or GeoJSON geometry value; ``None`` when absent or invalid."""
    if value is None:
        return None
    if isinstance(value, Mapping):
        return dict(value) if value.get("type") else None
    try:
        if isinstance(value, (bytes, bytearray, memoryview)):
            geometry = shapely.wkb.loads(bytes(value))
        elif isinstance(value, str):
            geometry = shapely.wkt.loads(value)
        else:
            return None
    except (ShapelyError, ValueError) as exc:
        _LOG.debug("Skipping undecodable geometry: %s", exc)
        return None
    if geometry.is_empty:
        return None
    return _json_native(mapping(geometry))


def to_json_value(value: Any) -> Any:
    """Coerce a decoded column value into a JSON-native value.

    Integers outside the exactly representable double range become floats,
    temporal values become ISO-8601 strings, decimals become floats and raw
    bytes become hex strings.
    """
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, int):
        return value if abs(value) <= MAX_SAFE_INTEGER else float(value)
    if isinstance(value, float):
        return None if math.isnan(value) or math.isinf(value) else value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, timedelta):
        return value.total_seconds()
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    if isinstance(value, Mapping):
        return {str(key): to_json_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_value(item) for item in value]
    return str(value)


def decode_geoparquet(data: bytes, geometry_column: str | None = None) -> dict[str, Any]:
    """Decode GeoParquet *data* into a GeoJSON ``FeatureCollection``.

    Rows without a decodable geometry are skipped.

    Raises:
        DecodeError: If *data* is not a readable Parquet file or holds values
            that cannot be converted to Python, such as out-of-range dates.
    """
    try:
        parquet_file = pq.ParquetFile(pa.BufferReader(data))
        table = parquet_file.read()
    except (pa.ArrowException, OSError) as exc:
        raise DecodeError(f"unreadable GeoParquet payload: {exc}") from exc

    column = resolve_geometry_column(parquet_file.metadata.metadata, geometry_column)
    if column not in table.column_names:
        _LOG.warning("Geometry column %r not found in columns %s", column, table.column_names)
        return empty_feature_collection()

    features: list[dict[str, Any]] = []
    skipped = 0
    try:
        for row in table.to_pylist():
            geometry = geometry_to_geojson(row.get(column))
            if geometry is None:
                skipped += 1
                continue
            properties = {key: to_json_value(value) for key, value in row.items() if key != column}
            features.append({"type": "Feature", "geometry": geometry, "properties": properties})
    except (pa.ArrowException, ValueError, OverflowError) as exc:
        raise DecodeError(f"unconvertible GeoParquet values: {exc}") from exc

    if skipped:
        _LOG.debug("Skipped %d rows without geometry", skipped)
    return {"type": "FeatureCollection", "features": features}
