"""Map spec contracts.

A :class:`MapSpec` is the whole declarative description of one map: basemap,
view, layers, markers and overlays. Instances are frozen; every edit or patch
produces a new value.
"""

from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from jsonmaps.contracts.layers import Coordinate, Layer

_SPEC_CONFIG = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

ZOOM_RANGE = (0.0, 22.0)
PITCH_RANGE = (0.0, 85.0)
BEARING_RANGE = (-180.0, 180.0)
LONGITUDE_RANGE = (-180.0, 180.0)
LATITUDE_RANGE = (-90.0, 90.0)

BASEMAP_STYLES: dict[str, str] = {
    "light": "https://basemaps.cartocdn.com/gl/positron-gl-style/style.json",
    "dark": "https://basemaps.cartocdn.com/gl/dark-matter-gl-style/style.json",
    "streets": "https://basemaps.cartocdn.com/gl/voyager-gl-style/style.json",
}

Projection = Literal["mercator", "globe"]
_PROJECTION_ALIASES: dict[str, Projection] = {"mercator": "mercator", "planar": "mercator", "globe": "globe"}


def clamp(value: float, bounds: tuple[float, float]) -> float:
    low, high = bounds
    return min(high, max(low, value))


def resolve_basemap_style(basemap: str | None, *, default: str = "light") -> str:
    """Map a basemap theme name or custom style URL to a style URL."""
    if not basemap:
        return BASEMAP_STYLES[default]
    if basemap in BASEMAP_STYLES:
        return BASEMAP_STYLES[basemap]
    if basemap.startswith("http"):
        return basemap
    return BASEMAP_STYLES[default]


class Popup(BaseModel):
    title: str | None = None
    description: str | None = None
    image: str | None = None

    model_config = _SPEC_CONFIG


class Marker(BaseModel):
    coordinates: Coordinate
    label: str | None = None
    icon: str | None = None
    color: str | None = None
    tooltip: str | None = None
    popup: Union[str, Popup, None] = None
    draggable: bool = False

    model_config = _SPEC_CONFIG


class Controls(BaseModel):
    zoom: bool | None = None
    compass: bool | None = None
    fullscreen: bool | None = None
    locate: bool | None = None
    scale: bool | None = None
    search: bool | None = None
    basemap_switcher: bool | None = Field(default=None, alias="basemapSwitcher")
    layer_switcher: Union[bool, dict[str, Any], None] = Field(default=None, alias="layerSwitcher")
    position: str | None = None

    model_config = _SPEC_CONFIG


class LegendEntry(BaseModel):
    layer: str
    title: str | None = None
    position: str | None = None

    model_config = _SPEC_CONFIG


class WidgetRow(BaseModel):
    label: str
    value: Union[str, float]
    color: str | None = None

    model_config = _SPEC_CONFIG


class Widget(BaseModel):
    """Positioned stat panel overlaid on the map."""

    title: str | None = None
    value: Union[str, float, None] = None
    description: str | None = None
    rows: list[WidgetRow] = Field(default_factory=list)
    position: str | None = None

    model_config = _SPEC_CONFIG


class MapSpec(BaseModel):
    """Root map specification. Unknown top-level fields are kept as extras."""

    basemap: str | None = None
    projection: Projection | None = None
    center: Coordinate | None = None
    zoom: float | None = None
    pitch: float | None = None
    bearing: float | None = None
    bounds: tuple[float, float, float, float] | None = None
    layers: dict[str, Layer] = Field(default_factory=dict)
    markers: dict[str, Marker] = Field(default_factory=dict)
    controls: Controls | None = None
    legend: dict[str, LegendEntry] = Field(default_factory=dict)
    widgets: dict[str, Widget] = Field(default_factory=dict)

    model_config = _SPEC_CONFIG

    @field_validator("projection", mode="before")
    @classmethod
    def normalize_projection(cls, value: Any) -> Any:
        if value is None or not isinstance(value, str):
            return value
        return _PROJECTION_ALIASES.get(value.strip().lower(), "mercator")

    @field_validator("center")
    @classmethod
    def clamp_center(cls, value: Coordinate | None) -> Coordinate | None:
        if value is None:
            return None
        lng, lat = value
        return (clamp(lng, LONGITUDE_RANGE), clamp(lat, LATITUDE_RANGE))

    @field_validator("zoom")
    @classmethod
    def clamp_zoom(cls, value: float | None) -> float | None:
        return None if value is None else clamp(value, ZOOM_RANGE)

    @field_validator("pitch")
    @classmethod
    def clamp_pitch(cls, value: float | None) -> float | None:
        return None if value is None else clamp(value, PITCH_RANGE)

    @field_validator("bearing")
    @classmethod
    def clamp_bearing(cls, value: float | None) -> float | None:
        return None if value is None else clamp(value, BEARING_RANGE)

    def to_document(self) -> dict[str, Any]:
        """JSON-ready dict using the wire field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
