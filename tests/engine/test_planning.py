from __future__ import annotations

from typing import Any

import pytest

from jsonmaps.contracts.operations import CAMERA_KINDS, OperationKind, RenderOperation
from jsonmaps.engine.diff import diff_mapping, effective_legend, plan_operations, reordered_keys
from tests.fakes.specs import geojson_layer, make_spec

LAYER_ENTITY_KINDS = {OperationKind.ADD_LAYER, OperationKind.REMOVE_LAYER}
MARKER_ENTITY_KINDS = {OperationKind.ADD_MARKER, OperationKind.REMOVE_MARKER}


def _kinds(operations: list[RenderOperation]) -> list[str]:
    return [str(operation) for operation in operations]


def test_diff_mapping_orders_and_classifies() -> None:
    diff = diff_mapping({"a": 1, "b": 2, "c": 3}, {"d": 4, "b": 2, "a": 9})

    assert diff.added == ["d"]
    assert diff.updated == ["a"]
    assert diff.removed == ["c"]
    assert not diff.is_empty
    assert diff_mapping({"a": 1}, {"a": 1}).is_empty


def test_initial_pass_sets_everything(sample_document: dict[str, Any]) -> None:
    operations = plan_operations(None, make_spec(**sample_document))

    assert _kinds(operations) == [
        "set_projection",
        "set_style",
        "add_layer:cafes",
        "add_marker:hq",
        "add_legend:cafes-legend",
        "add_widget:count",
        "set_camera",
    ]


def test_initial_pass_sets_controls_only_when_present() -> None:
    operations = plan_operations(None, make_spec(controls={"zoom": True}))

    assert "set_controls" in _kinds(operations)


@pytest.mark.parametrize(
    "document",
    [
        {},
        {"zoom": 4, "center": [10, 10]},
        {"basemap": "https://example.com/style.json", "bounds": [0, 0, 1, 1]},
        {"layers": {"a": geojson_layer(), "b": {"type": "hexbin"}}, "legend": {"l": {"layer": "zzz"}}},
        {"projection": "globe", "controls": {"scale": True}, "widgets": {"w": {"title": "T"}}},
    ],
)
def test_reconciling_a_spec_with_itself_is_a_no_op(document: dict[str, Any]) -> None:
    spec = make_spec(**document)

    assert plan_operations(spec, spec) == []
    assert plan_operations(spec, make_spec(**document)) == []


def test_zoom_only_change_moves_camera_without_entity_churn(sample_document: dict[str, Any]) -> None:
    before = make_spec(**sample_document)
    after = make_spec(**{**sample_document, "zoom": 14})

    operations = plan_operations(before, after)

    assert [operation.kind for operation in operations] == [OperationKind.SET_CAMERA]
    assert not {operation.kind for operation in operations} & (LAYER_ENTITY_KINDS | MARKER_ENTITY_KINDS)


def test_bounds_take_precedence_for_camera() -> None:
    operations = plan_operations(make_spec(zoom=3), make_spec(zoom=3, bounds=[0, 0, 10, 10]))

    assert [operation.kind for operation in operations] == [OperationKind.FIT_BOUNDS]
    assert OperationKind.FIT_BOUNDS in CAMERA_KINDS


def test_basemap_change_re_adds_every_layer_and_marker(sample_document: dict[str, Any]) -> None:
    before = make_spec(**sample_document)
    after = make_spec(**{**sample_document, "basemap": "light"})

    kinds = _kinds(plan_operations(before, after))

    assert kinds == [
        "remove_layer:cafes",
        "remove_marker:hq",
        "set_style",
        "add_layer:cafes",
        "add_marker:hq",
    ]


def test_equivalent_basemap_spellings_do_not_restyle() -> None:
    assert plan_operations(make_spec(), make_spec(basemap="light")) == []
    assert plan_operations(make_spec(basemap="sepia"), make_spec(basemap="light")) == []


def test_marker_replaced_under_same_id_is_one_update(sample_document: dict[str, Any]) -> None:
    before = make_spec(**sample_document)
    after = make_spec(**{**sample_document, "markers": {"hq": {"coordinates": [13.4, 52.5], "label": "Berlin"}}})

    operations = plan_operations(before, after)

    assert _kinds(operations) == ["update_marker:hq"]


def test_layer_changes_follow_draw_order() -> None:
    before = make_spec(layers={"a": geojson_layer(), "b": geojson_layer(), "c": geojson_layer()})
    after = make_spec(layers={"d": geojson_layer(), "a": geojson_layer("#000"), "c": geojson_layer()})

    assert _kinds(plan_operations(before, after)) == ["remove_layer:b", "add_layer:d", "update_layer:a"]


def test_reordered_keys_reports_keys_that_moved_back() -> None:
    assert reordered_keys({"a": 1, "b": 2, "c": 3}, {"a": 1, "c": 3, "b": 2}) == ["b"]
    assert reordered_keys({"a": 1, "b": 2, "c": 3}, {"c": 3, "a": 1, "b": 2}) == ["a", "b"]
    assert reordered_keys({"a": 1, "b": 2, "c": 3}, {"d": 4, "a": 1, "c": 3}) == []


def test_reordered_layer_is_removed_and_re_added() -> None:
    before = make_spec(layers={"a": geojson_layer(), "b": geojson_layer(), "c": geojson_layer()})
    after = make_spec(layers={"a": geojson_layer(), "c": geojson_layer(), "b": geojson_layer()})

    assert _kinds(plan_operations(before, after)) == ["remove_layer:b", "add_layer:b"]


def test_reordered_and_restyled_layers() -> None:
    before = make_spec(layers={"a": geojson_layer(), "b": geojson_layer()})
    after = make_spec(layers={"b": geojson_layer("#000"), "a": geojson_layer()})

    assert _kinds(plan_operations(before, after)) == ["remove_layer:a", "update_layer:b", "add_layer:a"]


def test_projection_change() -> None:
    assert _kinds(plan_operations(make_spec(), make_spec(projection="globe"))) == ["set_projection"]
    assert plan_operations(make_spec(), make_spec(projection="mercator")) == []


def test_controls_change_and_removal() -> None:
    assert _kinds(plan_operations(make_spec(), make_spec(controls={"zoom": True}))) == ["set_controls"]
    assert _kinds(plan_operations(make_spec(controls={"zoom": True}), make_spec())) == ["set_controls"]


def test_legend_follows_its_layer() -> None:
    legend = {"l": {"layer": "a", "title": "A"}}
    without_layer = make_spec(legend=legend)
    with_layer = make_spec(layers={"a": geojson_layer()}, legend=legend)
    restyled = make_spec(layers={"a": geojson_layer("#000")}, legend=legend)

    assert effective_legend(without_layer) == {}
    assert _kinds(plan_operations(without_layer, with_layer)) == ["add_layer:a", "add_legend:l"]
    assert _kinds(plan_operations(with_layer, restyled)) == ["update_layer:a", "update_legend:l"]
    assert _kinds(plan_operations(with_layer, without_layer)) == ["remove_layer:a", "remove_legend:l"]


def test_widget_lifecycle() -> None:
    first = make_spec(widgets={"w": {"title": "Count", "value": 1}})
    second = make_spec(widgets={"w": {"title": "Count", "value": 2}})

    assert _kinds(plan_operations(make_spec(), first)) == ["add_widget:w"]
    assert _kinds(plan_operations(first, second)) == ["update_widget:w"]
    assert _kinds(plan_operations(second, make_spec())) == ["remove_widget:w"]
