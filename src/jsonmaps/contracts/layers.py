"""Layer contracts: one model per layer kind, dispatched on ``type``."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, field_validator

Coordinate = tuple[float, float]
LayerData = Union[str, dict[str, Any]]

_LAYER_CONFIG = ConfigDict(frozen=True, extra="allow", populate_by_name=True)


def _clamp_unit(value: float | None) -> float | None:
    if value is None:
        return None
    return min(1.0, max(0.0, value))


class ContinuousColor(BaseModel):
    """Linear color ramp over a numeric feature attribute."""

    type: Literal["continuous"]
    attr: str = Field(min_length=1)
    palette: str
    domain: tuple[float, float] | None = None
    null_color: str | None = Field(default=None, alias="nullColor")

    model_config = _LAYER_CONFIG


class CategoricalColor(BaseModel):
    """One palette color per distinct category value."""

    type: Literal["categorical"]
    attr: str = Field(min_length=1)
    palette: str
    categories: list[str] | None = None
    null_color: str | None = Field(default=None, alias="nullColor")

    model_config = _LAYER_CONFIG


ColorBinding = Annotated[Union[ContinuousColor, CategoricalColor], Field(discriminator="type")]
ColorValue = Union[str, ColorBinding]


class ContinuousSize(BaseModel):
    type: Literal["continuous"]
    attr: str = Field(min_length=1)
    domain: tuple[float, float]
    range: tuple[float, float]

    model_config = _LAYER_CONFIG


SizeValue = Union[float, ContinuousSize]


class LayerStyle(BaseModel):
    fill_color: ColorValue | None = Field(default=None, alias="fillColor")
    point_color: ColorValue | None = Field(default=None, alias="pointColor")
    line_color: ColorValue | None = Field(default=None, alias="lineColor")
    line_width: float | None = Field(default=None, alias="lineWidth")
    point_radius: SizeValue | None = Field(default=None, alias="pointRadius")
    opacity: float | None = None

    model_config = _LAYER_CONFIG

    @field_validator("opacity")
    @classmethod
    def clamp_opacity(cls, value: float | None) -> float | None:
        return _clamp_unit(value)


class ClusterOptions(BaseModel):
    radius: float | None = None
    max_zoom: float | None = Field(default=None, alias="maxZoom")
    min_points: int | None = Field(default=None, alias="minPoints")
    colors: tuple[str, str, str] | None = None

    model_config = _LAYER_CONFIG


class _FeatureLayer(BaseModel):
    """Shared payload of the GeoJSON-backed vector layer kinds."""

    data: LayerData
    style: LayerStyle | None = None
    tooltip: list[str] | str | None = None
    cluster: bool = False
    cluster_options: ClusterOptions | None = Field(default=None, alias="clusterOptions")

    model_config = _LAYER_CONFIG


class GeoJsonLayer(_FeatureLayer):
    type: Literal["geojson"] = "geojson"


class ClusterLayer(_FeatureLayer):
    type: Literal["cluster"] = "cluster"


class FillLayer(_FeatureLayer):
    type: Literal["fill"] = "fill"


class CircleLayer(_FeatureLayer):
    type: Literal["circle"] = "circle"


class HeatmapLayer(BaseModel):
    type: Literal["heatmap"] = "heatmap"
    data: LayerData
    radius: float = 30
    intensity: float = 1
    opacity: float = 0.8
    palette: str = "OrYel"
    weight: str | None = None

    model_config = _LAYER_CONFIG

    @field_validator("opacity")
    @classmethod
    def clamp_opacity(cls, value: float | None) -> float | None:
        return _clamp_unit(value)


class RouteStyle(BaseModel):
    color: str | None = None
    width: float | None = None
    opacity: float | None = None
    dashed: bool = False

    model_config = _LAYER_CONFIG

    @field_validator("opacity")
    @classmethod
    def clamp_opacity(cls, value: float | None) -> float | None:
        return _clamp_unit(value)


class RouteLayer(BaseModel):
    """Line between endpoints; road geometry comes from a routing provider."""

    type: Literal["route"] = "route"
    from_: Coordinate | None = Field(default=None, alias="from")
    to: Coordinate | None = None
    waypoints: list[Coordinate] = Field(default_factory=list)
    coordinates: list[Coordinate] | None = None
    profile: Literal["driving", "walking", "cycling"] | None = None
    style: RouteStyle | None = None
    tooltip: list[str] | str | None = None

    model_config = _LAYER_CONFIG

    @property
    def is_routed(self) -> bool:
        return self.from_ is not None and self.to is not None

    def straight_line(self) -> list[Coordinate]:
        if self.is_routed:
            return [self.from_, *self.waypoints, self.to]  # type: ignore[list-item]
        return list(self.coordinates or [])


class RasterLayer(BaseModel):
    type: Literal["raster"] = "raster"
    url: str
    tile_size: int = Field(default=256, alias="tileSize")
    opacity: float = 0.8
    minzoom: float | None = None
    maxzoom: float | None = None
    attribution: str | None = None

    model_config = _LAYER_CONFIG

    @field_validator("opacity")
    @classmethod
    def clamp_opacity(cls, value: float | None) -> float | None:
        return _clamp_unit(value)

    @property
    def is_tile_template(self) -> bool:
        return "{z}" in self.url or "{x}" in self.url


class ColumnarLayer(BaseModel):
    """GeoParquet file rendered as GeoJSON once decoded."""

    type: Literal["columnar", "parquet"] = "columnar"
    data: str
    geometry_column: str | None = Field(default=None, alias="geometryColumn")
    style: LayerStyle | None = None
    tooltip: list[str] | str | None = None
    cluster: bool = False
    cluster_options: ClusterOptions | None = Field(default=None, alias="clusterOptions")

    model_config = _LAYER_CONFIG


class OpaqueLayer(BaseModel):
    """Layer of a kind this renderer does not know; kept verbatim, drawn as nothing."""

    type: Any = None

    model_config = _LAYER_CONFIG


_LAYER_TAGS = {
    "geojson": "geojson",
    "cluster": "cluster",
    "fill": "fill",
    "circle": "circle",
    "heatmap": "heatmap",
    "route": "route",
    "raster": "raster",
    "columnar": "columnar",
    "parquet": "columnar",
}


def _layer_tag(value: Any) -> str:
    kind = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    if not isinstance(kind, str):
        return "opaque"
    return _LAYER_TAGS.get(kind, "opaque")


Layer = Annotated[
    Union[
        Annotated[GeoJsonLayer, Tag("geojson")],
        Annotated[ClusterLayer, Tag("cluster")],
        Annotated[FillLayer, Tag("fill")],
        Annotated[CircleLayer, Tag("circle")],
        Annotated[HeatmapLayer, Tag("heatmap")],
        Annotated[RouteLayer, Tag("route")],
        Annotated[RasterLayer, Tag("raster")],
        Annotated[ColumnarLayer, Tag("columnar")],
        Annotated[OpaqueLayer, Tag("opaque")],
    ],
    Discriminator(_layer_tag),
]

FeatureLayer = Union[GeoJsonLayer, ClusterLayer, FillLayer, CircleLayer]
