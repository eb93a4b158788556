"""Reconciliation observer protocol.

The reconciler emits pass and deferred-layer lifecycle events; consumers
(e.g. the CLI's Rich progress display) implement ``ReconcileListener``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from jsonmaps.contracts.operations import ReconcileResult


class ReconcileListener(ABC):
    @abstractmethod
    def pass_done(self, result: ReconcileResult) -> None:
        """A reconciliation pass issued its synchronous operations."""
        ...  # pragma: no cover

    @abstractmethod
    def layer_resolved(self, layer_id: str) -> None:
        """Deferred data for *layer_id* arrived and was rendered."""
        ...  # pragma: no cover

    @abstractmethod
    def layer_discarded(self, layer_id: str) -> None:
        """Deferred data for *layer_id* arrived after the layer changed and was dropped."""
        ...  # pragma: no cover

    @abstractmethod
    def layer_failed(self, layer_id: str, error: BaseException) -> None:
        """Deferred data for *layer_id* could not be loaded; the layer stays absent."""
        ...  # pragma: no cover


class NullReconcileListener(ReconcileListener):
    """No-op implementation used when nobody is listening."""

    def pass_done(self, result: ReconcileResult) -> None:
        pass

    def layer_resolved(self, layer_id: str) -> None:
        pass

    def layer_discarded(self, layer_id: str) -> None:
        pass

    def layer_failed(self, layer_id: str, error: BaseException) -> None:
        pass
