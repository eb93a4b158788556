"""Session composition root: stream, validate and reconcile against one renderer."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterable, Mapping
from types import TracebackType
from typing import Any

import httpx
from pydantic import BaseModel, Field

from jsonmaps.contracts.config import JsonMapsConfig
from jsonmaps.contracts.exceptions import SpecValidationError
from jsonmaps.contracts.operations import ReconcileResult
from jsonmaps.contracts.renderer import MapRenderer
from jsonmaps.contracts.routing import RoutingProvider
from jsonmaps.contracts.spec import MapSpec
from jsonmaps.contracts.stream import SpecSnapshot, StreamNotice, StreamStats, TokenUsage, UsageReport
from jsonmaps.engine.listener import ReconcileListener
from jsonmaps.engine.reconciler import MapReconciler
from jsonmaps.ingest.cache import TableCache
from jsonmaps.ingest.fetch import TableFetcher
from jsonmaps.patch.stream import PatchStream
from jsonmaps.routing import OsrmRoutingProvider
from jsonmaps.spec.validator import format_spec_issues, validate

_LOG = logging.getLogger(__name__)


class StreamOutcome(BaseModel):
    """Summary of one streamed generation applied to a session."""

    document: dict[str, Any]
    spec: MapSpec | None = None
    snapshots: int = 0
    rendered: int = 0
    rejected: int = 0
    operations: int = 0
    usage: TokenUsage | None = None
    notices: list[StreamNotice] = Field(default_factory=list)
    stats: StreamStats = Field(default_factory=StreamStats)
    issues: list[str] = Field(default_factory=list)
    repair_prompt: str | None = None

    @property
    def is_valid(self) -> bool:
        return not self.issues


class MapSession:
    """Drives one renderer from whole specs or from a streamed patch generation."""

    def __init__(
        self,
        renderer: MapRenderer,
        *,
        config: JsonMapsConfig | None = None,
        tables: TableCache | None = None,
        routing: RoutingProvider | None = None,
        listener: ReconcileListener | None = None,
    ) -> None:
        self._config = config or JsonMapsConfig()
        self._owned: list[Any] = []
        self._reconciler = MapReconciler(
            renderer,
            tables=tables,
            routing=routing,
            listener=listener,
            default_basemap=self._config.default_basemap,
            fit_bounds_padding=self._config.fit_bounds_padding,
        )

    @classmethod
    def from_config(
        cls,
        renderer: MapRenderer,
        config: JsonMapsConfig,
        *,
        listener: ReconcileListener | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> MapSession:
        """Build a session with its own fetcher, table cache and OSRM provider."""
        fetcher = TableFetcher.from_config(config, transport=transport)
        routing = OsrmRoutingProvider(
            config.routing_url,
            timeout=config.request_timeout,
            max_retries=config.max_retries,
            transport=transport,
        )
        session = cls(renderer, config=config, tables=TableCache(fetcher), routing=routing, listener=listener)
        session._owned.extend([fetcher, routing])
        return session

    @property
    def spec(self) -> MapSpec | None:
        return self._reconciler.applied

    async def __aenter__(self) -> MapSession:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._reconciler.close()
        for resource in self._owned:
            await resource.aclose()
        self._owned.clear()

    async def apply(self, raw: Mapping[str, Any] | MapSpec) -> ReconcileResult:
        """Validate *raw* and reconcile the renderer to it.

        Raises:
            SpecValidationError: If *raw* is structurally malformed; nothing is rendered.
        """
        return await self._reconciler.reconcile(validate(raw))

    async def settle(self) -> None:
        await self._reconciler.settle()

    async def stream(
        self,
        chunks: AsyncIterable[str | bytes],
        *,
        initial: Mapping[str, Any] | None = None,
    ) -> StreamOutcome:
        """Apply a patch stream, rendering every valid intermediate snapshot.

        The stream starts from *initial*, else from the currently applied
        spec. Invalid intermediate snapshots are skipped; the final
        document's issues are reported in the outcome rather than raised.
        """
        if initial is None and self.spec is not None:
            initial = self.spec.to_document()
        patch_stream = PatchStream(initial)
        outcome = StreamOutcome(document=patch_stream.document)

        async for event in patch_stream.consume(chunks):
            if isinstance(event, SpecSnapshot):
                outcome.snapshots += 1
                try:
                    spec = validate(event.document)
                except SpecValidationError as exc:
                    outcome.rejected += 1
                    _LOG.debug("Skipping invalid snapshot %d: %s", event.sequence, exc.errors)
                    continue
                result = await self._reconciler.reconcile(spec)
                outcome.rendered += 1
                outcome.operations += len(result.operations)
                outcome.spec = spec
            elif isinstance(event, UsageReport):
                outcome.usage = event.usage
            else:
                outcome.notices.append(event)

        outcome.document = patch_stream.document
        outcome.stats = patch_stream.stats
        try:
            validate(outcome.document)
        except SpecValidationError as exc:
            outcome.issues = exc.errors
            outcome.repair_prompt = format_spec_issues(outcome.document)
        await self._reconciler.settle()
        return outcome
