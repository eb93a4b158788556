"""Issue planned operations against a renderer."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from jsonmaps.contracts.layers import Layer
from jsonmaps.contracts.operations import OperationKind, RenderOperation
from jsonmaps.contracts.renderer import MapRenderer
from jsonmaps.contracts.spec import MapSpec, resolve_basemap_style
from jsonmaps.engine.diff import DEFAULT_CENTER, DEFAULT_ZOOM, effective_legend
from jsonmaps.engine.layers import RenderedLayer, render_static

_LOG = logging.getLogger(__name__)

LEGEND_OVERLAY = "legend"
WIDGET_OVERLAY = "widget"

DeferHook = Callable[[str, Layer], bool]


class OperationExecutor:
    """Tracks what is drawn per layer id and turns entity operations into renderer calls.

    All calls for one :meth:`execute` happen synchronously, so a pass is
    never interleaved with another pass or with deferred work.
    """

    def __init__(
        self,
        renderer: MapRenderer,
        *,
        default_basemap: str = "light",
        fit_bounds_padding: int = 40,
        defer: DeferHook | None = None,
    ) -> None:
        self._renderer = renderer
        self._default_basemap = default_basemap
        self._padding = fit_bounds_padding
        self._defer = defer
        self._rendered: dict[str, RenderedLayer] = {}
        self._order: list[str] = []

    @property
    def rendered(self) -> dict[str, RenderedLayer]:
        return dict(self._rendered)

    def seed(self, spec: MapSpec) -> None:
        """Record what *spec* would have drawn, without touching the renderer."""
        self._rendered = {}
        self._order = list(spec.layers)
        for layer_id, layer in spec.layers.items():
            rendered = render_static(layer_id, layer)
            if rendered is not None:
                self._rendered[layer_id] = rendered

    def reset(self) -> None:
        self._rendered = {}
        self._order = []

    def execute(self, operations: list[RenderOperation], spec: MapSpec) -> list[str]:
        """Apply *operations* for target *spec*; returns the layer ids handed to the defer hook."""
        deferred: list[str] = []
        self._order = list(spec.layers)
        for operation in operations:
            kind, target = operation.kind, operation.target or ""
            if kind is OperationKind.SET_PROJECTION:
                self._renderer.set_projection(spec.projection or "mercator")
            elif kind is OperationKind.SET_STYLE:
                self._renderer.set_style(resolve_basemap_style(spec.basemap, default=self._default_basemap))
            elif kind in (OperationKind.ADD_LAYER, OperationKind.UPDATE_LAYER):
                layer = spec.layers[target]
                if self._defer is not None and self._defer(target, layer):
                    deferred.append(target)
                    continue
                rendered = render_static(target, layer)
                if rendered is None:
                    self.drop(target)
                else:
                    self.apply(target, rendered)
            elif kind is OperationKind.REMOVE_LAYER:
                self.drop(target)
            elif kind is OperationKind.ADD_MARKER:
                self._renderer.add_marker(target, spec.markers[target])
            elif kind is OperationKind.UPDATE_MARKER:
                self._renderer.update_marker(target, spec.markers[target])
            elif kind is OperationKind.REMOVE_MARKER:
                self._renderer.remove_marker(target)
            elif kind is OperationKind.SET_CONTROLS:
                controls = spec.controls.model_dump(by_alias=True, exclude_none=True) if spec.controls else {}
                self._renderer.set_controls(controls)
            elif kind in (OperationKind.ADD_LEGEND, OperationKind.UPDATE_LEGEND):
                payload = self._legend_payload(spec, target)
                if kind is OperationKind.ADD_LEGEND:
                    self._renderer.add_overlay(LEGEND_OVERLAY, target, payload)
                else:
                    self._renderer.update_overlay(LEGEND_OVERLAY, target, payload)
            elif kind is OperationKind.REMOVE_LEGEND:
                self._renderer.remove_overlay(LEGEND_OVERLAY, target)
            elif kind in (OperationKind.ADD_WIDGET, OperationKind.UPDATE_WIDGET):
                payload = spec.widgets[target].model_dump(mode="json", by_alias=True, exclude_none=True)
                if kind is OperationKind.ADD_WIDGET:
                    self._renderer.add_overlay(WIDGET_OVERLAY, target, payload)
                else:
                    self._renderer.update_overlay(WIDGET_OVERLAY, target, payload)
            elif kind is OperationKind.REMOVE_WIDGET:
                self._renderer.remove_overlay(WIDGET_OVERLAY, target)
            elif kind is OperationKind.FIT_BOUNDS:
                assert spec.bounds is not None
                self._renderer.fit_bounds(spec.bounds, padding=self._padding)
            elif kind is OperationKind.SET_CAMERA:
                self._renderer.set_camera(
                    center=spec.center or DEFAULT_CENTER,
                    zoom=DEFAULT_ZOOM if spec.zoom is None else spec.zoom,
                    pitch=spec.pitch or 0.0,
                    bearing=spec.bearing or 0.0,
                )
            else:  # pragma: no cover
                raise ValueError(f"unhandled operation kind: {kind}")
        return deferred

    def apply(self, layer_id: str, rendered: RenderedLayer) -> None:
        """Draw *rendered* for *layer_id*, updating an existing source and sub-layers in place.

        New sub-layers go below the nearest drawn layer that follows *layer_id*
        in the current spec, so layers resolved late still keep spec order.
        """
        previous = self._rendered.get(layer_id)
        if previous is not None and previous.source_type != rendered.source_type:
            self.drop(layer_id)
            previous = None

        if previous is None:
            self._renderer.add_source(rendered.source_id, rendered.source)
            before = self._before(layer_id)
            for sublayer_id, definition in rendered.sublayers.items():
                self._renderer.add_layer(sublayer_id, definition, before=before)
        else:
            if previous.source != rendered.source:
                self._renderer.update_source(rendered.source_id, rendered.source)
            for sublayer_id in previous.sublayers:
                if sublayer_id not in rendered.sublayers:
                    self._renderer.remove_layer(sublayer_id)
            sublayer_ids = list(rendered.sublayers)
            for index, (sublayer_id, definition) in enumerate(rendered.sublayers.items()):
                if sublayer_id not in previous.sublayers:
                    above = [other for other in sublayer_ids[index + 1 :] if other in previous.sublayers]
                    before = above[0] if above else self._before(layer_id)
                    self._renderer.add_layer(sublayer_id, definition, before=before)
                elif previous.sublayers[sublayer_id] != definition:
                    self._renderer.update_layer(sublayer_id, definition)
        self._rendered[layer_id] = rendered

    def _before(self, layer_id: str) -> str | None:
        if layer_id not in self._order:
            return None
        for other in self._order[self._order.index(layer_id) + 1 :]:
            rendered = self._rendered.get(other)
            if rendered is not None and rendered.sublayers:
                return next(iter(rendered.sublayers))
        return None

    def drop(self, layer_id: str) -> None:
        """Remove whatever is drawn for *layer_id*; a no-op when nothing is."""
        rendered = self._rendered.pop(layer_id, None)
        if rendered is None:
            return
        for sublayer_id in reversed(list(rendered.sublayers)):
            self._renderer.remove_layer(sublayer_id)
        self._renderer.remove_source(rendered.source_id)
        _LOG.debug("Removed layer %r", layer_id)

    @staticmethod
    def _legend_payload(spec: MapSpec, legend_id: str) -> dict[str, Any]:
        entry, layer = effective_legend(spec)[legend_id]
        payload = entry.model_dump(mode="json", by_alias=True, exclude_none=True)
        payload["layerSpec"] = layer.model_dump(mode="json", by_alias=True, exclude_none=True)
        return payload
