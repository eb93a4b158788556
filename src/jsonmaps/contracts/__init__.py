"""Public contracts for jsonmaps."""

from jsonmaps.contracts.config import JsonMapsConfig
from jsonmaps.contracts.exceptions import (
    ConfigError,
    DecodeError,
    FetchError,
    JsonMapsError,
    PatchParseError,
    ReconcileError,
    RoutingError,
    SpecLoadError,
    SpecValidationError,
)
from jsonmaps.contracts.layers import (
    CategoricalColor,
    CircleLayer,
    ClusterLayer,
    ClusterOptions,
    ColumnarLayer,
    ContinuousColor,
    ContinuousSize,
    Coordinate,
    FeatureLayer,
    FillLayer,
    GeoJsonLayer,
    HeatmapLayer,
    Layer,
    LayerStyle,
    OpaqueLayer,
    RasterLayer,
    RouteLayer,
    RouteStyle,
)
from jsonmaps.contracts.operations import (
    CAMERA_KINDS,
    MappingDiff,
    OperationKind,
    ReconcileResult,
    RenderOperation,
)
from jsonmaps.contracts.renderer import MapRenderer
from jsonmaps.contracts.routing import RouteRequest, RoutingProvider
from jsonmaps.contracts.spec import Controls, LegendEntry, MapSpec, Marker, Popup, Widget, WidgetRow
from jsonmaps.contracts.stream import (
    Patch,
    SpecSnapshot,
    StreamEvent,
    StreamNotice,
    StreamStats,
    TokenUsage,
    UsageReport,
)

__all__ = [
    "CAMERA_KINDS",
    "CategoricalColor",
    "CircleLayer",
    "ClusterLayer",
    "ClusterOptions",
    "ColumnarLayer",
    "ConfigError",
    "ContinuousColor",
    "ContinuousSize",
    "Controls",
    "Coordinate",
    "DecodeError",
    "FeatureLayer",
    "FetchError",
    "FillLayer",
    "GeoJsonLayer",
    "HeatmapLayer",
    "JsonMapsConfig",
    "JsonMapsError",
    "Layer",
    "LayerStyle",
    "LegendEntry",
    "MapRenderer",
    "MapSpec",
    "MappingDiff",
    "Marker",
    "OpaqueLayer",
    "OperationKind",
    "Patch",
    "PatchParseError",
    "Popup",
    "RasterLayer",
    "ReconcileError",
    "ReconcileResult",
    "RenderOperation",
    "RouteLayer",
    "RouteRequest",
    "RouteStyle",
    "RoutingError",
    "RoutingProvider",
    "SpecLoadError",
    "SpecSnapshot",
    "SpecValidationError",
    "StreamEvent",
    "StreamNotice",
    "StreamStats",
    "TokenUsage",
    "UsageReport",
    "Widget",
    "WidgetRow",
]
