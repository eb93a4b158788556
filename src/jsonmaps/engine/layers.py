"""Translate spec layers into renderer sources and sub-layer definitions.

Every spec layer ``<id>`` owns one source ``jm-<id>`` and a fixed family of
sub-layers named ``jm-<id>-fill``, ``-line``, ``-circle``, ``-cluster``,
``-cluster-count``, ``-heatmap`` and ``-raster``; which members exist depends
on the layer kind.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from jsonmaps.contracts.layers import (
    CircleLayer,
    ClusterLayer,
    ColumnarLayer,
    Coordinate,
    FillLayer,
    GeoJsonLayer,
    HeatmapLayer,
    Layer,
    LayerData,
    LayerStyle,
    RasterLayer,
    RouteLayer,
)
from jsonmaps.engine.styles import color_expression, heatmap_ramp, size_expression

SOURCE_PREFIX = "jm-"

DEFAULT_FILL_COLOR = "#3b82f6"
DEFAULT_LINE_COLOR = "#333333"
DEFAULT_OPACITY = 0.8
DEFAULT_LINE_WIDTH = 1
DEFAULT_POINT_RADIUS = 5
DEFAULT_CLUSTER_COLORS = ("#22c55e", "#eab308", "#ef4444")
TOOLTIP_METADATA_KEY = "jsonmaps:tooltip"

_POLYGON_FILTER = ["any", ["==", ["geometry-type"], "Polygon"], ["==", ["geometry-type"], "MultiPolygon"]]
_POINT_FILTER = ["any", ["==", ["geometry-type"], "Point"], ["==", ["geometry-type"], "MultiPoint"]]
_CLUSTER_FILTER = ["has", "point_count"]


class RenderedLayer(BaseModel):
    """Renderer-facing form of one spec layer: a source plus ordered sub-layers."""

    source_id: str
    source: dict[str, Any]
    sublayers: dict[str, dict[str, Any]] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @property
    def source_type(self) -> str | None:
        return self.source.get("type")


def source_id_for(layer_id: str) -> str:
    return f"{SOURCE_PREFIX}{layer_id}"


def _tooltip_columns(tooltip: list[str] | str | None) -> list[str] | None:
    if not tooltip:
        return None
    if isinstance(tooltip, str):
        return ["_text"]
    return list(tooltip)


def _sublayer(
    source_id: str,
    suffix: str,
    kind: str,
    *,
    paint: dict[str, Any],
    layout: dict[str, Any] | None = None,
    layer_filter: list[Any] | None = None,
    tooltip: list[str] | None = None,
) -> tuple[str, dict[str, Any]]:
    layer_id = f"{source_id}{suffix}"
    definition: dict[str, Any] = {"id": layer_id, "type": kind, "source": source_id, "paint": paint}
    if layout:
        definition["layout"] = layout
    if layer_filter is not None:
        definition["filter"] = layer_filter
    if tooltip:
        definition["metadata"] = {TOOLTIP_METADATA_KEY: tooltip}
    return layer_id, definition


def build_feature_layer(
    layer_id: str,
    layer: GeoJsonLayer | ClusterLayer | FillLayer | CircleLayer | ColumnarLayer,
    data: LayerData,
) -> RenderedLayer:
    """GeoJSON-backed vector layer; columnar layers pass their decoded features as *data*."""
    source_id = source_id_for(layer_id)
    style = layer.style or LayerStyle()
    opacity = DEFAULT_OPACITY if style.opacity is None else style.opacity
    line_width = DEFAULT_LINE_WIDTH if style.line_width is None else style.line_width
    clustered = isinstance(layer, ClusterLayer) or layer.cluster
    options = layer.cluster_options

    tooltip = _tooltip_columns(layer.tooltip)
    if tooltip is None and isinstance(layer, ColumnarLayer) and isinstance(data, dict):
        features = data.get("features") or []
        if features:
            tooltip = list((features[0].get("properties") or {}).keys()) or None

    source: dict[str, Any] = {"type": "geojson", "data": data}
    if clustered:
        source["cluster"] = True
        source["clusterRadius"] = options.radius if options and options.radius is not None else 50
        source["clusterMaxZoom"] = options.max_zoom if options and options.max_zoom is not None else 14
        source["clusterMinPoints"] = options.min_points if options and options.min_points is not None else 2

    draw_polygons = not isinstance(layer, CircleLayer)
    draw_points = not isinstance(layer, FillLayer)
    line_color = color_expression(style.line_color or DEFAULT_LINE_COLOR)
    sublayers: dict[str, dict[str, Any]] = {}

    if draw_polygons:
        key, definition = _sublayer(
            source_id,
            "-fill",
            "fill",
            paint={"fill-color": color_expression(style.fill_color or DEFAULT_FILL_COLOR), "fill-opacity": opacity},
            layer_filter=_POLYGON_FILTER,
            tooltip=tooltip,
        )
        sublayers[key] = definition
        key, definition = _sublayer(
            source_id,
            "-line",
            "line",
            paint={"line-color": line_color, "line-width": line_width, "line-opacity": min(opacity + 0.1, 1.0)},
            layer_filter=_POLYGON_FILTER if isinstance(layer, FillLayer) else None,
            tooltip=tooltip,
        )
        sublayers[key] = definition

    if draw_points:
        point_filter: list[Any] = ["all", ["!", _CLUSTER_FILTER], _POINT_FILTER] if clustered else _POINT_FILTER
        key, definition = _sublayer(
            source_id,
            "-circle",
            "circle",
            paint={
                "circle-color": color_expression(style.point_color or style.fill_color or DEFAULT_FILL_COLOR),
                "circle-radius": size_expression(
                    DEFAULT_POINT_RADIUS if style.point_radius is None else style.point_radius,
                    DEFAULT_POINT_RADIUS,
                ),
                "circle-opacity": opacity,
                "circle-stroke-width": line_width,
                "circle-stroke-color": line_color,
            },
            layer_filter=point_filter,
            tooltip=tooltip,
        )
        sublayers[key] = definition

    if clustered:
        low, mid, high = options.colors if options and options.colors else DEFAULT_CLUSTER_COLORS
        key, definition = _sublayer(
            source_id,
            "-cluster",
            "circle",
            paint={
                "circle-color": ["step", ["get", "point_count"], low, 100, mid, 750, high],
                "circle-radius": ["step", ["get", "point_count"], 20, 100, 30, 750, 40],
                "circle-stroke-width": 1,
                "circle-stroke-color": "#fff",
                "circle-opacity": 0.85,
            },
            layer_filter=_CLUSTER_FILTER,
        )
        sublayers[key] = definition
        key, definition = _sublayer(
            source_id,
            "-cluster-count",
            "symbol",
            paint={"text-color": "#fff"},
            layout={"text-field": "{point_count_abbreviated}", "text-size": 12},
            layer_filter=_CLUSTER_FILTER,
        )
        sublayers[key] = definition

    return RenderedLayer(source_id=source_id, source=source, sublayers=sublayers)


def build_heatmap_layer(layer_id: str, layer: HeatmapLayer) -> RenderedLayer:
    source_id = source_id_for(layer_id)
    paint: dict[str, Any] = {
        "heatmap-radius": layer.radius,
        "heatmap-intensity": layer.intensity,
        "heatmap-opacity": layer.opacity,
        "heatmap-color": heatmap_ramp(layer.palette),
    }
    if layer.weight:
        paint["heatmap-weight"] = ["get", layer.weight]
    key, definition = _sublayer(source_id, "-heatmap", "heatmap", paint=paint)
    source = {"type": "geojson", "data": layer.data}
    return RenderedLayer(source_id=source_id, source=source, sublayers={key: definition})


def build_route_layer(layer_id: str, layer: RouteLayer, coordinates: list[Coordinate]) -> RenderedLayer:
    source_id = source_id_for(layer_id)
    style = layer.style
    paint: dict[str, Any] = {
        "line-color": (style.color if style else None) or "#3b82f6",
        "line-width": style.width if style and style.width is not None else 3,
        "line-opacity": style.opacity if style and style.opacity is not None else 0.8,
    }
    if style and style.dashed:
        paint["line-dasharray"] = [6, 3]
    feature = {
        "type": "Feature",
        "properties": {},
        "geometry": {"type": "LineString", "coordinates": [list(point) for point in coordinates]},
    }
    key, definition = _sublayer(
        source_id,
        "-line",
        "line",
        paint=paint,
        layout={"line-join": "round", "line-cap": "round"},
        tooltip=_tooltip_columns(layer.tooltip),
    )
    return RenderedLayer(source_id=source_id, source={"type": "geojson", "data": feature}, sublayers={key: definition})


def build_raster_layer(layer_id: str, layer: RasterLayer) -> RenderedLayer:
    source_id = source_id_for(layer_id)
    source: dict[str, Any] = {"type": "raster", "tileSize": layer.tile_size}
    if layer.is_tile_template:
        source["tiles"] = [layer.url]
    else:
        source["url"] = layer.url
    if layer.minzoom is not None:
        source["minzoom"] = layer.minzoom
    if layer.maxzoom is not None:
        source["maxzoom"] = layer.maxzoom
    if layer.attribution:
        source["attribution"] = layer.attribution
    key, definition = _sublayer(source_id, "-raster", "raster", paint={"raster-opacity": layer.opacity})
    return RenderedLayer(source_id=source_id, source=source, sublayers={key: definition})


def render_static(layer_id: str, layer: Layer) -> RenderedLayer | None:
    """Render a layer that needs no awaited data, or ``None`` when there is nothing to draw yet.

    Columnar layers always return ``None`` here; routed layers are drawn as
    their straight polyline.
    """
    if isinstance(layer, (GeoJsonLayer, ClusterLayer, FillLayer, CircleLayer)):
        return build_feature_layer(layer_id, layer, layer.data)
    if isinstance(layer, HeatmapLayer):
        return build_heatmap_layer(layer_id, layer)
    if isinstance(layer, RasterLayer):
        return build_raster_layer(layer_id, layer)
    if isinstance(layer, RouteLayer):
        coordinates = layer.straight_line()
        if len(coordinates) < 2:
            return None
        return build_route_layer(layer_id, layer, coordinates)
    # ColumnarLayer and OpaqueLayer
    return None
