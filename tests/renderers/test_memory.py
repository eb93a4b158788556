from __future__ import annotations

from typing import Any

from jsonmaps.contracts.spec import BASEMAP_STYLES, Marker
from jsonmaps.engine import reconcile
from jsonmaps.renderers import InMemoryRenderer
from jsonmaps.spec import validate


def test_reconcile_into_memory_renderer(sample_document: dict[str, Any]) -> None:
    renderer = InMemoryRenderer()

    reconcile(renderer, None, validate(sample_document))

    assert renderer.style == BASEMAP_STYLES["dark"]
    assert renderer.projection == "mercator"
    assert "jm-cafes" in renderer.sources
    assert all(layer_id.startswith("jm-cafes-") for layer_id in renderer.layers)
    assert list(renderer.markers) == ["hq"]
    assert renderer.overlay_ids("legend") == ["cafes-legend"]
    assert renderer.overlay_ids("widget") == ["count"]
    assert renderer.camera == {"center": (2.35, 48.85), "zoom": 11.0, "pitch": 0.0, "bearing": 0.0}
    assert renderer.conflicts == 0


def test_follow_up_pass_removes_dropped_entities(sample_document: dict[str, Any]) -> None:
    renderer = InMemoryRenderer()
    first = validate(sample_document)
    reconcile(renderer, None, first)

    second = validate({**sample_document, "layers": {}, "markers": {}, "widgets": {}})
    reconcile(renderer, first, second)

    assert renderer.sources == {}
    assert renderer.layers == {}
    assert renderer.markers == {}
    assert renderer.overlay_ids("legend") == []
    assert renderer.overlay_ids("widget") == []
    assert renderer.conflicts == 0


def test_conflicting_calls_are_counted_not_raised() -> None:
    renderer = InMemoryRenderer()
    marker = Marker(coordinates=(0.0, 0.0))

    renderer.add_marker("a", marker)
    renderer.add_marker("a", marker)
    renderer.update_layer("missing", {})
    renderer.remove_overlay("widget", "missing")

    assert renderer.conflicts == 3
    assert renderer.calls == 4
    assert renderer.layers == {"missing": {}}


def test_fit_bounds_replaces_camera() -> None:
    renderer = InMemoryRenderer()

    renderer.set_camera(center=(1.0, 2.0), zoom=3.0, pitch=0.0, bearing=0.0)
    renderer.fit_bounds((0.0, 0.0, 1.0, 1.0), padding=40)

    assert renderer.camera == {"bounds": (0.0, 0.0, 1.0, 1.0), "padding": 40}


def test_add_layer_below_anchor_keeps_draw_order() -> None:
    renderer = InMemoryRenderer()

    renderer.add_layer("top", {})
    renderer.add_layer("bottom", {}, before="top")
    renderer.add_layer("middle", {}, before="top")
    renderer.add_layer("stray", {}, before="missing")

    assert list(renderer.layers) == ["bottom", "middle", "top", "stray"]
    assert renderer.conflicts == 1
