"""httpx async transport wrapper with retry and backoff for remote data fetches."""

from __future__ import annotations

import asyncio
import logging
import random

import httpx

_LOG = logging.getLogger(__name__)

# Status codes considered transient and eligible for automatic retry.
_RETRYABLE_STATUS_CODES = frozenset({429, 502, 503, 504})


class RetryingTransport(httpx.AsyncBaseTransport):
    """Wraps an httpx async transport with automatic retry on transient failures.

    Retries transport-level errors and 429/502/503/504 responses up to
    *max_retries* times with exponential backoff plus jitter, honouring a
    numeric ``Retry-After`` header (capped at *max_delay*).
    """

    def __init__(
        self,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        max_retries: int = 2,
        max_delay: float = 4.0,
    ) -> None:
        self._transport = transport or httpx.AsyncHTTPTransport()
        self._max_retries = max_retries
        self._max_delay = max_delay

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        for attempt in range(self._max_retries + 1):
            try:
                response = await self._transport.handle_async_request(request)
            except httpx.TransportError:
                if attempt >= self._max_retries:
                    raise
                await self._sleep_backoff(request, attempt)
                continue

            if response.status_code in _RETRYABLE_STATUS_CODES and attempt < self._max_retries:
                await response.aclose()
                await self._sleep_backoff(request, attempt, retry_after=self._parse_retry_after(response))
                continue

            return response

        raise httpx.TransportError("Request failed after retries")  # pragma: no cover

    async def aclose(self) -> None:
        await self._transport.aclose()

    @staticmethod
    def _parse_retry_after(response: httpx.Response) -> float:
        raw = response.headers.get("Retry-After")
        if raw is None:
            return 0.0
        try:
            return max(0.0, float(raw))
        except ValueError:
            return 0.0

    async def _sleep_backoff(self, request: httpx.Request, attempt: int, *, retry_after: float = 0.0) -> None:
        seconds = max(retry_after, min(self._max_delay, float(2**attempt)) + random.uniform(0.0, 0.25))
        seconds = min(seconds, self._max_delay)
        _LOG.warning("Retrying %s %s (attempt %d)", request.method, request.url, attempt + 1)
        await asyncio.sleep(seconds)
