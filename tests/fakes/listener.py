"""Event-recording reconcile listener fake."""

from __future__ import annotations

from jsonmaps.contracts.operations import ReconcileResult
from jsonmaps.engine.listener import ReconcileListener


class RecordingListener(ReconcileListener):
    def __init__(self) -> None:
        self.events: list[tuple[str, str]] = []
        self.results: list[ReconcileResult] = []

    def pass_done(self, result: ReconcileResult) -> None:
        self.results.append(result)
        self.events.append(("pass", str(len(result.operations))))

    def layer_resolved(self, layer_id: str) -> None:
        self.events.append(("resolved", layer_id))

    def layer_discarded(self, layer_id: str) -> None:
        self.events.append(("discarded", layer_id))

    def layer_failed(self, layer_id: str, error: BaseException) -> None:
        self.events.append(("failed", layer_id))
