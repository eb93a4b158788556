"""Reconciliation operation contracts."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class OperationKind(StrEnum):
    """Entity-level renderer operation planned by a reconciliation pass."""

    SET_PROJECTION = "set_projection"
    SET_STYLE = "set_style"
    ADD_LAYER = "add_layer"
    UPDATE_LAYER = "update_layer"
    REMOVE_LAYER = "remove_layer"
    ADD_MARKER = "add_marker"
    UPDATE_MARKER = "update_marker"
    REMOVE_MARKER = "remove_marker"
    SET_CONTROLS = "set_controls"
    ADD_LEGEND = "add_legend"
    UPDATE_LEGEND = "update_legend"
    REMOVE_LEGEND = "remove_legend"
    ADD_WIDGET = "add_widget"
    UPDATE_WIDGET = "update_widget"
    REMOVE_WIDGET = "remove_widget"
    SET_CAMERA = "set_camera"
    FIT_BOUNDS = "fit_bounds"


CAMERA_KINDS = frozenset({OperationKind.SET_CAMERA, OperationKind.FIT_BOUNDS})


class RenderOperation(BaseModel):
    kind: OperationKind
    target: str | None = None

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return self.kind.value if self.target is None else f"{self.kind.value}:{self.target}"


class MappingDiff(BaseModel):
    added: list[str] = Field(default_factory=list)
    updated: list[str] = Field(default_factory=list)
    removed: list[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.updated or self.removed)


class ReconcileResult(BaseModel):
    operations: list[RenderOperation] = Field(default_factory=list)
    deferred: list[str] = Field(default_factory=list)

    def targets(self, kind: OperationKind) -> list[str]:
        return [op.target for op in self.operations if op.kind is kind and op.target is not None]
