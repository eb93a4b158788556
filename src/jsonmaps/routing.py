"""OSRM routing provider."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

import httpx

from jsonmaps.contracts.exceptions import RoutingError
from jsonmaps.contracts.layers import Coordinate
from jsonmaps.contracts.routing import RouteRequest, RoutingProvider
from jsonmaps.ingest._retrying_transport import RetryingTransport

_LOG = logging.getLogger(__name__)


class OsrmRoutingProvider(RoutingProvider):
    """Resolves routes against an OSRM ``/route/v1`` endpoint."""

    def __init__(
        self,
        base_url: str = "https://router.project-osrm.org",
        *,
        timeout: float = 30.0,
        max_retries: int = 2,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._max_retries = max_retries
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> OsrmRoutingProvider:
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

    def route_url(self, request: RouteRequest) -> str:
        points = ";".join(f"{lng},{lat}" for lng, lat in request.points())
        return f"{self._base_url}/route/v1/{request.profile}/{points}?geometries=geojson&overview=full"

    async def route(self, request: RouteRequest) -> list[Coordinate]:
        url = self.route_url(request)
        try:
            response = await self._require_client().get(url)
        except httpx.HTTPError as exc:
            raise RoutingError(f"routing request failed: {exc}") from exc
        if response.status_code >= 400:
            raise RoutingError(f"routing service returned {response.status_code}")

        try:
            payload: Any = response.json()
            geometry = payload["routes"][0]["geometry"]
            coordinates = [(float(point[0]), float(point[1])) for point in geometry["coordinates"]]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise RoutingError("routing response has no route geometry") from exc
        if len(coordinates) < 2:
            raise RoutingError("routing response geometry has fewer than two points")

        _LOG.debug("Resolved %s route with %d points", request.profile, len(coordinates))
        return coordinates

    def _require_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                transport=RetryingTransport(transport=self._transport, max_retries=self._max_retries),
                timeout=httpx.Timeout(self._timeout),
            )
        return self._client
