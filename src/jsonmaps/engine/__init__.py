"""Reconciliation engine."""

from jsonmaps.engine.diff import DEFAULT_CENTER, DEFAULT_ZOOM, diff_mapping, effective_legend, plan_operations
from jsonmaps.engine.executor import OperationExecutor
from jsonmaps.engine.layers import RenderedLayer, render_static, source_id_for
from jsonmaps.engine.listener import NullReconcileListener, ReconcileListener
from jsonmaps.engine.reconciler import MapReconciler, reconcile
from jsonmaps.engine.styles import color_expression, heatmap_ramp, size_expression

__all__ = [
    "DEFAULT_CENTER",
    "DEFAULT_ZOOM",
    "MapReconciler",
    "NullReconcileListener",
    "OperationExecutor",
    "ReconcileListener",
    "RenderedLayer",
    "color_expression",
    "diff_mapping",
    "effective_legend",
    "heatmap_ramp",
    "plan_operations",
    "reconcile",
    "render_static",
    "size_expression",
    "source_id_for",
]
