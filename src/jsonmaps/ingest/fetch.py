"""Remote file retrieval with same-origin proxy fallback."""

from __future__ import annotations

import logging
from types import TracebackType
from urllib.parse import urlencode

import httpx

from jsonmaps.contracts.config import JsonMapsConfig
from jsonmaps.contracts.exceptions import FetchError
from jsonmaps.ingest._retrying_transport import RetryingTransport

_LOG = logging.getLogger(__name__)


def proxied_url(proxy_url: str, url: str) -> str:
    return f"{proxy_url}?{urlencode({'url': url})}"


class TableFetcher:
    """Fetches file bytes directly, then once through the proxy endpoint on failure.

    Use as an async context manager, or call :meth:`aclose` when done.
    """

    def __init__(
        self,
        *,
        proxy_url: str | None = None,
        timeout: float = 30.0,
        max_retries: int = 2,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._proxy_url = proxy_url
        self._timeout = timeout
        self._max_retries = max_retries
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_config(cls, config: JsonMapsConfig, *, transport: httpx.AsyncBaseTransport | None = None) -> TableFetcher:
        return cls(
            proxy_url=config.proxy_url,
            timeout=config.request_timeout,
            max_retries=config.max_retries,
            transport=transport,
        )

    async def __aenter__(self) -> TableFetcher:
        self._require_client()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch(self, url: str) -> bytes:
        """Return the body of *url*.

        Raises:
            FetchError: If both the direct and the proxied request fail.
        """
        try:
            return await self._get(url, source_url=url)
        except FetchError as direct_error:
            if not self._proxy_url:
                raise
            _LOG.info("Direct fetch of %s failed (%s); retrying through proxy", url, direct_error)
            try:
                return await self._get(proxied_url(self._proxy_url, url), source_url=url)
            except FetchError as proxy_error:
                raise FetchError(
                    f"failed to fetch {url} directly ({direct_error}) and through proxy ({proxy_error})",
                    url=url,
                    status=proxy_error.status or direct_error.status,
                ) from proxy_error

    async def _get(self, request_url: str, *, source_url: str) -> bytes:
        client = self._require_client()
        try:
            response = await client.get(request_url)
        except httpx.HTTPError as exc:
            raise FetchError(f"request failed: {exc}", url=source_url) from exc
        if response.status_code >= 400:
            raise FetchError(f"upstream returned {response.status_code}", url=source_url, status=response.status_code)
        return response.content

    def _require_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                transport=RetryingTransport(transport=self._transport, max_retries=self._max_retries),
                timeout=httpx.Timeout(self._timeout),
                follow_redirects=True,
            )
        return self._client
