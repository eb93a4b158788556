"""Headless renderer keeping the drawn map state in memory."""

from __future__ import annotations

import logging
from typing import Any

from jsonmaps.contracts.layers import Coordinate
from jsonmaps.contracts.renderer import MapRenderer
from jsonmaps.contracts.spec import Marker, Projection

_LOG = logging.getLogger(__name__)


def _move_before(store: dict[str, Any], key: str, before: str) -> dict[str, Any]:
    value = store.pop(key)
    reordered: dict[str, Any] = {}
    for other, item in store.items():
        if other == before:
            reordered[key] = value
        reordered[other] = item
    return reordered


class InMemoryRenderer(MapRenderer):
    """Keeps style, sources, layers, markers, overlays and camera as plain data.

    Used by the CLI to run reconciliation without a display. Calls that
    reference a missing id, or add an id that already exists, are logged
    and counted in :attr:`conflicts` instead of raising.
    """

    def __init__(self) -> None:
        self.style: str | None = None
        self.projection: Projection | None = None
        self.sources: dict[str, dict[str, Any]] = {}
        self.layers: dict[str, dict[str, Any]] = {}
        self.markers: dict[str, Marker] = {}
        self.controls: dict[str, Any] = {}
        self.overlays: dict[tuple[str, str], dict[str, Any]] = {}
        self.camera: dict[str, Any] = {}
        self.calls = 0
        self.conflicts = 0

    def set_style(self, style_url: str) -> None:
        self.calls += 1
        self.style = style_url

    def set_projection(self, projection: Projection) -> None:
        self.calls += 1
        self.projection = projection

    def add_source(self, source_id: str, source: dict[str, Any]) -> None:
        self._put(self.sources, source_id, source, adding=True)

    def update_source(self, source_id: str, source: dict[str, Any]) -> None:
        self._put(self.sources, source_id, source, adding=False)

    def remove_source(self, source_id: str) -> None:
        self._pop(self.sources, source_id)

    def add_layer(self, layer_id: str, definition: dict[str, Any], *, before: str | None = None) -> None:
        self._put(self.layers, layer_id, definition, adding=True)
        if before is None:
            return
        if before == layer_id or before not in self.layers:
            self.conflicts += 1
            _LOG.warning("add of %r below unknown layer %r", layer_id, before)
            return
        self.layers = _move_before(self.layers, layer_id, before)

    def update_layer(self, layer_id: str, definition: dict[str, Any]) -> None:
        self._put(self.layers, layer_id, definition, adding=False)

    def remove_layer(self, layer_id: str) -> None:
        self._pop(self.layers, layer_id)

    def add_marker(self, marker_id: str, marker: Marker) -> None:
        self._put(self.markers, marker_id, marker, adding=True)

    def update_marker(self, marker_id: str, marker: Marker) -> None:
        self._put(self.markers, marker_id, marker, adding=False)

    def remove_marker(self, marker_id: str) -> None:
        self._pop(self.markers, marker_id)

    def set_controls(self, controls: dict[str, Any]) -> None:
        self.calls += 1
        self.controls = dict(controls)

    def add_overlay(self, kind: str, overlay_id: str, payload: dict[str, Any]) -> None:
        self._put(self.overlays, (kind, overlay_id), payload, adding=True)

    def update_overlay(self, kind: str, overlay_id: str, payload: dict[str, Any]) -> None:
        self._put(self.overlays, (kind, overlay_id), payload, adding=False)

    def remove_overlay(self, kind: str, overlay_id: str) -> None:
        self._pop(self.overlays, (kind, overlay_id))

    def set_camera(self, *, center: Coordinate, zoom: float, pitch: float, bearing: float) -> None:
        self.calls += 1
        self.camera = {"center": center, "zoom": zoom, "pitch": pitch, "bearing": bearing}

    def fit_bounds(self, bounds: tuple[float, float, float, float], *, padding: int) -> None:
        self.calls += 1
        self.camera = {"bounds": bounds, "padding": padding}

    def overlay_ids(self, kind: str) -> list[str]:
        return [overlay_id for overlay_kind, overlay_id in self.overlays if overlay_kind == kind]

    def _put(self, store: dict[Any, Any], key: Any, value: Any, *, adding: bool) -> None:
        self.calls += 1
        if adding == (key in store):
            self.conflicts += 1
            _LOG.warning("%s of %r conflicts with current state", "add" if adding else "update", key)
        store[key] = value

    def _pop(self, store: dict[Any, Any], key: Any) -> None:
        self.calls += 1
        if store.pop(key, None) is None:
            self.conflicts += 1
            _LOG.warning("remove of unknown %r", key)
