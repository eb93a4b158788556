"""Renderer adapter contract.

The renderer is an externally owned, mutable map handle (a vector-tile
engine instance). The reconciliation engine only ever drives it through
these id-addressed calls; implementations should treat repeated calls with
the same arguments as idempotent.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from jsonmaps.contracts.layers import Coordinate
from jsonmaps.contracts.spec import Marker, Projection


class MapRenderer(ABC):
    @abstractmethod
    def set_style(self, style_url: str) -> None: ...  # pragma: no cover

    @abstractmethod
    def set_projection(self, projection: Projection) -> None: ...  # pragma: no cover

    @abstractmethod
    def add_source(self, source_id: str, source: dict[str, Any]) -> None: ...  # pragma: no cover

    @abstractmethod
    def update_source(self, source_id: str, source: dict[str, Any]) -> None: ...  # pragma: no cover

    @abstractmethod
    def remove_source(self, source_id: str) -> None: ...  # pragma: no cover

    @abstractmethod
    def add_layer(self, layer_id: str, definition: dict[str, Any], *, before: str | None = None) -> None:
        """Draw *definition* directly below the existing layer *before*, or on top when it is ``None``."""

    @abstractmethod
    def update_layer(self, layer_id: str, definition: dict[str, Any]) -> None: ...  # pragma: no cover

    @abstractmethod
    def remove_layer(self, layer_id: str) -> None: ...  # pragma: no cover

    @abstractmethod
    def add_marker(self, marker_id: str, marker: Marker) -> None: ...  # pragma: no cover

    @abstractmethod
    def update_marker(self, marker_id: str, marker: Marker) -> None: ...  # pragma: no cover

    @abstractmethod
    def remove_marker(self, marker_id: str) -> None: ...  # pragma: no cover

    @abstractmethod
    def set_controls(self, controls: dict[str, Any]) -> None: ...  # pragma: no cover

    @abstractmethod
    def add_overlay(self, kind: str, overlay_id: str, payload: dict[str, Any]) -> None: ...  # pragma: no cover

    @abstractmethod
    def update_overlay(self, kind: str, overlay_id: str, payload: dict[str, Any]) -> None: ...  # pragma: no cover

    @abstractmethod
    def remove_overlay(self, kind: str, overlay_id: str) -> None: ...  # pragma: no cover

    @abstractmethod
    def set_camera(
        self,
        *,
        center: Coordinate,
        zoom: float,
        pitch: float,
        bearing: float,
    ) -> None: ...  # pragma: no cover

    @abstractmethod
    def fit_bounds(self, bounds: tuple[float, float, float, float], *, padding: int) -> None: ...  # pragma: no cover
