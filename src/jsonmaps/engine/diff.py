"""Structural spec diff and operation planning (pure)."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from jsonmaps.contracts.operations import MappingDiff, OperationKind, RenderOperation
from jsonmaps.contracts.spec import MapSpec, resolve_basemap_style

DEFAULT_CENTER: tuple[float, float] = (0.0, 20.0)
DEFAULT_ZOOM = 1.5


def diff_mapping(previous: Mapping[str, Any], next_: Mapping[str, Any]) -> MappingDiff:
    """Key-wise diff; ``added``/``updated`` follow *next_* order, ``removed`` follows *previous* order."""
    diff = MappingDiff()
    for key, value in next_.items():
        if key not in previous:
            diff.added.append(key)
        elif previous[key] != value:
            diff.updated.append(key)
    diff.removed.extend(key for key in previous if key not in next_)
    return diff


def reordered_keys(previous: Mapping[str, Any], next_: Mapping[str, Any]) -> list[str]:
    """Keys present in both mappings that no longer keep their relative order, in *next_* order.

    Keys are walked in *next_* order; a key whose *previous* position lies
    behind a key already kept in place is reported as moved.
    """
    position = {key: index for index, key in enumerate(previous)}
    moved: list[str] = []
    last = -1
    for key in next_:
        if key not in position:
            continue
        if position[key] > last:
            last = position[key]
        else:
            moved.append(key)
    return moved


def effective_legend(spec: MapSpec) -> dict[str, tuple[Any, Any]]:
    """Legend entries whose layer exists, paired with that layer."""
    return {
        legend_id: (entry, spec.layers[entry.layer])
        for legend_id, entry in spec.legend.items()
        if entry.layer in spec.layers
    }


def camera_state(spec: MapSpec) -> tuple[Any, ...]:
    return (spec.center, spec.zoom, spec.pitch, spec.bearing, spec.bounds)


def camera_operation(spec: MapSpec) -> RenderOperation:
    if spec.bounds is not None:
        return RenderOperation(kind=OperationKind.FIT_BOUNDS)
    return RenderOperation(kind=OperationKind.SET_CAMERA)


def _entity_operations(
    diff: MappingDiff,
    *,
    add: OperationKind,
    update: OperationKind,
    remove: OperationKind,
    order: list[str],
) -> list[RenderOperation]:
    operations = [RenderOperation(kind=remove, target=key) for key in diff.removed]
    added, updated = set(diff.added), set(diff.updated)
    for key in order:
        if key in added:
            operations.append(RenderOperation(kind=add, target=key))
        elif key in updated:
            operations.append(RenderOperation(kind=update, target=key))
    return operations


def plan_operations(
    previous: MapSpec | None,
    next_: MapSpec,
    *,
    default_basemap: str = "light",
) -> list[RenderOperation]:
    """Plan the minimal entity-level operations moving a renderer from *previous* to *next_*.

    ``None`` for *previous* means a freshly created renderer: the style,
    projection and camera are always set and every entity is added.

    Order: projection, basemap, layers (removals then draw order), markers,
    controls, legend, widgets, camera. A basemap change re-adds every layer
    and marker because the new style drops them. Layers that moved in draw
    order are removed and re-added at their new position.
    """
    operations: list[RenderOperation] = []
    initial = previous is None
    prior = previous if previous is not None else MapSpec()
    prior_legend = effective_legend(prior)

    if initial or (prior.projection or "mercator") != (next_.projection or "mercator"):
        operations.append(RenderOperation(kind=OperationKind.SET_PROJECTION))

    basemap_changed = resolve_basemap_style(prior.basemap, default=default_basemap) != resolve_basemap_style(
        next_.basemap, default=default_basemap
    )
    if initial or basemap_changed:
        if basemap_changed and not initial:
            operations.extend(RenderOperation(kind=OperationKind.REMOVE_LAYER, target=key) for key in prior.layers)
            operations.extend(RenderOperation(kind=OperationKind.REMOVE_MARKER, target=key) for key in prior.markers)
            prior = prior.model_copy(update={"layers": {}, "markers": {}})
        operations.append(RenderOperation(kind=OperationKind.SET_STYLE))

    layer_order = list(next_.layers)
    layer_diff = diff_mapping(prior.layers, next_.layers)
    moved = reordered_keys(prior.layers, next_.layers)
    if moved:
        layer_diff = MappingDiff(
            added=[*layer_diff.added, *moved],
            updated=[key for key in layer_diff.updated if key not in moved],
            removed=[*layer_diff.removed, *moved],
        )
    operations.extend(
        _entity_operations(
            layer_diff,
            add=OperationKind.ADD_LAYER,
            update=OperationKind.UPDATE_LAYER,
            remove=OperationKind.REMOVE_LAYER,
            order=layer_order,
        )
    )
    operations.extend(
        _entity_operations(
            diff_mapping(prior.markers, next_.markers),
            add=OperationKind.ADD_MARKER,
            update=OperationKind.UPDATE_MARKER,
            remove=OperationKind.REMOVE_MARKER,
            order=list(next_.markers),
        )
    )

    if (initial and next_.controls is not None) or (not initial and prior.controls != next_.controls):
        operations.append(RenderOperation(kind=OperationKind.SET_CONTROLS))

    next_legend = effective_legend(next_)
    operations.extend(
        _entity_operations(
            diff_mapping(prior_legend, next_legend),
            add=OperationKind.ADD_LEGEND,
            update=OperationKind.UPDATE_LEGEND,
            remove=OperationKind.REMOVE_LEGEND,
            order=list(next_legend),
        )
    )
    operations.extend(
        _entity_operations(
            diff_mapping(prior.widgets, next_.widgets),
            add=OperationKind.ADD_WIDGET,
            update=OperationKind.UPDATE_WIDGET,
            remove=OperationKind.REMOVE_WIDGET,
            order=list(next_.widgets),
        )
    )

    if initial or camera_state(prior) != camera_state(next_):
        operations.append(camera_operation(next_))
    return operations
