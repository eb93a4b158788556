"""Reconciliation engine: keeps one renderer in step with successive map specs."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

from jsonmaps.contracts.exceptions import JsonMapsError, ReconcileError, RoutingError
from jsonmaps.contracts.layers import ColumnarLayer, Coordinate, Layer, RouteLayer
from jsonmaps.contracts.operations import OperationKind, ReconcileResult, RenderOperation
from jsonmaps.contracts.renderer import MapRenderer
from jsonmaps.contracts.routing import RouteRequest, RoutingProvider
from jsonmaps.contracts.spec import MapSpec
from jsonmaps.engine.diff import plan_operations
from jsonmaps.engine.executor import OperationExecutor
from jsonmaps.engine.layers import RenderedLayer, build_feature_layer, build_route_layer
from jsonmaps.engine.listener import NullReconcileListener, ReconcileListener
from jsonmaps.ingest.cache import TableCache

_LOG = logging.getLogger(__name__)

_LAYER_KINDS = frozenset({OperationKind.ADD_LAYER, OperationKind.UPDATE_LAYER, OperationKind.REMOVE_LAYER})


class MapReconciler:
    """Owns the last applied spec for one renderer and reconciles new specs against it.

    Columnar layers and routed layers are deferred: their data is awaited
    in background tasks and applied only if the layer has not changed in
    the meantime. Every add, update or remove of a layer id bumps that id's
    generation, so a late result for a superseded layer is dropped.
    """

    def __init__(
        self,
        renderer: MapRenderer,
        *,
        tables: TableCache | None = None,
        routing: RoutingProvider | None = None,
        listener: ReconcileListener | None = None,
        default_basemap: str = "light",
        fit_bounds_padding: int = 40,
    ) -> None:
        self._tables = tables
        self._routing = routing
        self._listener = listener or NullReconcileListener()
        self._default_basemap = default_basemap
        self._executor = OperationExecutor(
            renderer,
            default_basemap=default_basemap,
            fit_bounds_padding=fit_bounds_padding,
            defer=self._defer,
        )
        self._applied: MapSpec | None = None
        self._generations: dict[str, int] = {}
        self._tasks: set[asyncio.Task[None]] = set()
        self._lock = asyncio.Lock()
        self._closed = False

    @property
    def applied(self) -> MapSpec | None:
        """The last spec handed to :meth:`reconcile`."""
        return self._applied

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def rendered(self) -> dict[str, RenderedLayer]:
        return self._executor.rendered

    async def reconcile(self, next_spec: MapSpec) -> ReconcileResult:
        """Diff *next_spec* against the last applied spec and issue the resulting operations.

        Raises:
            ReconcileError: If the reconciler has been closed.
        """
        if self._closed:
            raise ReconcileError("reconciler is closed")

        async with self._lock:
            operations = plan_operations(self._applied, next_spec, default_basemap=self._default_basemap)
            for operation in operations:
                if operation.kind in _LAYER_KINDS and operation.target is not None:
                    self._generations[operation.target] = self._generations.get(operation.target, 0) + 1
            deferred = self._executor.execute(operations, next_spec)
            self._applied = next_spec

        result = ReconcileResult(operations=operations, deferred=deferred)
        _LOG.debug("Reconciled %d operations (%d deferred layers)", len(operations), len(deferred))
        self._listener.pass_done(result)
        return result

    async def settle(self) -> None:
        """Wait until all deferred layer work, including work scheduled meanwhile, has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def close(self) -> None:
        """Cancel deferred work and forget the last applied spec; the renderer is left as is."""
        self._closed = True
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
        self._applied = None
        self._generations.clear()
        self._executor.reset()

    # ------------------------------------------------------------------
    # Deferred layers
    # ------------------------------------------------------------------

    def _defer(self, layer_id: str, layer: Layer) -> bool:
        generation = self._generations.get(layer_id, 0)
        if isinstance(layer, ColumnarLayer):
            if self._tables is None:
                _LOG.warning("No table cache configured; columnar layer %r is not rendered", layer_id)
                self._executor.drop(layer_id)
                return False
            self._spawn(self._load_columnar(layer_id, layer, generation))
            return True
        if isinstance(layer, RouteLayer) and layer.is_routed and self._routing is not None:
            self._spawn(self._resolve_route(layer_id, layer, generation))
            return True
        return False

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _is_current(self, layer_id: str, generation: int) -> bool:
        return not self._closed and self._generations.get(layer_id, 0) == generation

    async def _load_columnar(self, layer_id: str, layer: ColumnarLayer, generation: int) -> None:
        assert self._tables is not None
        try:
            features = await self._tables.load(layer.data, layer.geometry_column)
        except JsonMapsError as exc:
            async with self._lock:
                if not self._is_current(layer_id, generation):
                    self._listener.layer_discarded(layer_id)
                    return
                _LOG.warning("Failed to load columnar layer %r from %s: %s", layer_id, layer.data, exc)
                self._executor.drop(layer_id)
            self._listener.layer_failed(layer_id, exc)
            return
        await self._apply_deferred(layer_id, generation, build_feature_layer(layer_id, layer, features))

    async def _resolve_route(self, layer_id: str, layer: RouteLayer, generation: int) -> None:
        assert self._routing is not None and layer.from_ is not None and layer.to is not None
        request = RouteRequest(
            origin=layer.from_,
            destination=layer.to,
            waypoints=layer.waypoints,
            profile=layer.profile or "driving",
        )
        coordinates: list[Coordinate]
        try:
            coordinates = await self._routing.route(request)
        except RoutingError as exc:
            _LOG.warning("Routing failed for layer %r, falling back to straight line: %s", layer_id, exc)
            coordinates = layer.straight_line()
        await self._apply_deferred(layer_id, generation, build_route_layer(layer_id, layer, coordinates))

    async def _apply_deferred(self, layer_id: str, generation: int, rendered: RenderedLayer) -> None:
        async with self._lock:
            if not self._is_current(layer_id, generation):
                _LOG.debug("Dropping stale deferred result for layer %r", layer_id)
                self._listener.layer_discarded(layer_id)
                return
            self._executor.apply(layer_id, rendered)
        self._listener.layer_resolved(layer_id)


def reconcile(
    renderer: MapRenderer,
    previous: MapSpec | None,
    next_spec: MapSpec,
    *,
    default_basemap: str = "light",
    fit_bounds_padding: int = 40,
) -> list[RenderOperation]:
    """Plan and execute one pass from *previous* to *next_spec* without deferred work.

    *renderer* is assumed to currently show *previous*. Columnar layers are
    not drawn and are logged as skipped; routed layers are drawn as straight
    lines.
    """
    skipped: list[str] = []

    def skip_columnar(layer_id: str, layer: Layer) -> bool:
        if isinstance(layer, ColumnarLayer):
            skipped.append(layer_id)
        return False

    executor = OperationExecutor(
        renderer,
        default_basemap=default_basemap,
        fit_bounds_padding=fit_bounds_padding,
        defer=skip_columnar,
    )
    if previous is not None:
        executor.seed(previous)
    operations = plan_operations(previous, next_spec, default_basemap=default_basemap)
    executor.execute(operations, next_spec)
    if skipped:
        _LOG.warning("Columnar layers need MapReconciler and were not drawn: %s", ", ".join(skipped))
    return operations
