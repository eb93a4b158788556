"""Process-wide cache of decoded columnar layer data."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from jsonmaps.contracts.exceptions import DecodeError
from jsonmaps.ingest.fetch import TableFetcher
from jsonmaps.ingest.geoparquet import decode_geoparquet, empty_feature_collection

_LOG = logging.getLogger(__name__)

CacheKey = tuple[str, str | None]


class TableCache:
    """Feature collections keyed by ``(url, geometry_column)``.

    Concurrent loads of one key share a single in-flight fetch. Fetch
    failures are not cached; undecodable payloads are cached as an empty
    collection. Entries live until :meth:`clear` or :meth:`evict`.
    """

    def __init__(self, fetcher: TableFetcher) -> None:
        self._fetcher = fetcher
        self._entries: dict[CacheKey, dict[str, Any]] = {}
        self._inflight: dict[CacheKey, asyncio.Task[dict[str, Any]]] = {}
        self._generations: dict[CacheKey, int] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    async def load(self, url: str, geometry_column: str | None = None) -> dict[str, Any]:
        key: CacheKey = (url, geometry_column)
        cached = self._entries.get(key)
        if cached is not None:
            return cached

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.create_task(self._load(key, self._generations.get(key, 0)))
            self._inflight[key] = task
            task.add_done_callback(lambda done, key=key: self._forget(key, done))
        return await asyncio.shield(task)

    def clear(self) -> None:
        for key in {*self._entries, *self._inflight}:
            self._bump(key)
        self._entries.clear()
        self._inflight.clear()

    def evict(self, url: str) -> None:
        for key in [key for key in {*self._entries, *self._inflight} if key[0] == url]:
            self._bump(key)
            self._entries.pop(key, None)
            self._inflight.pop(key, None)

    async def _load(self, key: CacheKey, generation: int) -> dict[str, Any]:
        url, geometry_column = key
        data = await self._fetcher.fetch(url)
        try:
            collection = decode_geoparquet(data, geometry_column)
        except DecodeError as exc:
            _LOG.warning("Could not decode %s: %s", url, exc)
            collection = empty_feature_collection()
        if self._generations.get(key, 0) == generation:
            self._entries[key] = collection
        return collection

    def _bump(self, key: CacheKey) -> None:
        self._generations[key] = self._generations.get(key, 0) + 1

    def _forget(self, key: CacheKey, task: asyncio.Task[dict[str, Any]]) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        if not task.cancelled() and task.exception() is not None:
            _LOG.debug("Load of %s failed: %s", key[0], task.exception())
