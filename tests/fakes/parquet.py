"""GeoParquet payload builders."""

from __future__ import annotations

import json
from typing import Any

import pyarrow as pa
import pyarrow.parquet as pq
import shapely.geometry


def make_geoparquet(
    geometries: list[Any],
    columns: dict[str, list[Any]] | None = None,
    *,
    geometry_column: str = "geometry",
    geo_metadata: dict[str, Any] | bytes | None = None,
) -> bytes:
    """Serialize shapely geometries (or ``None``) as WKB plus property columns.

    ``geo_metadata`` defaults to a GeoParquet ``geo`` entry naming
    *geometry_column* as primary; pass raw bytes to write it verbatim.
    """
    arrays: dict[str, Any] = {name: values for name, values in (columns or {}).items()}
    arrays[geometry_column] = pa.array(
        [None if geom is None else shapely.to_wkb(geom) for geom in geometries],
        type=pa.binary(),
    )
    table = pa.table(arrays)

    if geo_metadata is None:
        geo_metadata = {
            "version": "1.0.0",
            "primary_column": geometry_column,
            "columns": {geometry_column: {"encoding": "WKB"}},
        }
    raw = geo_metadata if isinstance(geo_metadata, bytes) else json.dumps(geo_metadata).encode()
    table = table.replace_schema_metadata({b"geo": raw})

    sink = pa.BufferOutputStream()
    pq.write_table(table, sink)
    return sink.getvalue().to_pybytes()


def point(lng: float, lat: float) -> shapely.geometry.Point:
    return shapely.geometry.Point(lng, lat)
