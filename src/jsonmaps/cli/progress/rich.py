"""Rich-based reconciliation progress display."""

from __future__ import annotations

from types import TracebackType

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.progress import TaskID as RichTaskID

from jsonmaps.contracts.operations import ReconcileResult
from jsonmaps.engine.listener import ReconcileListener


class RichReconcileListener(ReconcileListener):
    """Live terminal progress for reconcile passes and deferred layer loads.

    Use as a context manager so the live display is properly started/stopped::

        with RichReconcileListener() as listener:
            session = MapSession(renderer, listener=listener)
            await session.stream(chunks)

    With *live* false the progress bars are never drawn, but operations and
    layer failures are still printed.
    """

    def __init__(self, *, show_operations: bool = False, live: bool = True, console: Console | None = None) -> None:
        self._console = console or Console(stderr=True)
        self._show_operations = show_operations
        self._live = live
        self._progress = Progress(
            SpinnerColumn(finished_text="[green]✓[/green]"),
            TextColumn("{task.description:>14}"),
            BarColumn(bar_width=30),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=self._console,
            transient=False,
        )
        self._passes: RichTaskID | None = None
        self._deferred: RichTaskID | None = None
        self.failures: dict[str, BaseException] = {}

    def __enter__(self) -> RichReconcileListener:
        if self._live:
            self._progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._live:
            self._finish()
            self._progress.stop()

    def pass_done(self, result: ReconcileResult) -> None:
        if self._passes is None:
            self._passes = self._progress.add_task("[cyan]Reconcile[/]", total=None)
        self._progress.advance(self._passes)
        if result.deferred:
            if self._deferred is None:
                self._deferred = self._progress.add_task("[blue]Deferred[/]", total=0)
            task = self._progress.tasks[self._deferred]
            self._progress.update(self._deferred, total=(task.total or 0) + len(result.deferred))
        if self._show_operations:
            for operation in result.operations:
                self._console.print(f"  {operation}", markup=False, highlight=False)

    def layer_resolved(self, layer_id: str) -> None:
        self._advance_deferred()

    def layer_discarded(self, layer_id: str) -> None:
        self._advance_deferred()

    def layer_failed(self, layer_id: str, error: BaseException) -> None:
        self.failures[layer_id] = error
        self._advance_deferred()
        self._console.print(f"[red]✗[/red] layer {layer_id}: {error}", highlight=False)

    def _advance_deferred(self) -> None:
        if self._deferred is not None:
            self._progress.advance(self._deferred)

    def _finish(self) -> None:
        if self._passes is None:
            return
        task = self._progress.tasks[self._passes]
        self._progress.update(self._passes, total=task.completed)
