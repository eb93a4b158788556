from __future__ import annotations

import httpx
import pytest

from jsonmaps.contracts.exceptions import RoutingError
from jsonmaps.contracts.routing import RouteRequest
from jsonmaps.routing import OsrmRoutingProvider


def _provider(handler) -> OsrmRoutingProvider:  # type: ignore[no-untyped-def]
    return OsrmRoutingProvider("https://osrm.example.com/", max_retries=0, transport=httpx.MockTransport(handler))


def test_route_url_lists_points_in_order() -> None:
    provider = OsrmRoutingProvider("https://osrm.example.com/")
    request = RouteRequest(origin=(2.35, 48.85), destination=(4.83, 45.76), waypoints=[(3.0, 47.0)], profile="cycling")

    assert provider.route_url(request) == (
        "https://osrm.example.com/route/v1/cycling/2.35,48.85;3.0,47.0;4.83,45.76?geometries=geojson&overview=full"
    )


@pytest.mark.asyncio
async def test_route_returns_geometry_coordinates() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path.startswith("/route/v1/driving/")
        return httpx.Response(
            200,
            json={"code": "Ok", "routes": [{"geometry": {"type": "LineString", "coordinates": [[0, 0], [1, 2]]}}]},
        )

    async with _provider(handler) as provider:
        coordinates = await provider.route(RouteRequest(origin=(0, 0), destination=(1, 2)))

    assert coordinates == [(0.0, 0.0), (1.0, 2.0)]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500),
        httpx.Response(200, json={"code": "NoRoute", "routes": []}),
        httpx.Response(200, content=b"<html>"),
        httpx.Response(200, json={"routes": [{"geometry": {"coordinates": [[0, 0]]}}]}),
    ],
)
async def test_route_failures_raise_routing_error(response: httpx.Response) -> None:
    async with _provider(lambda request: response) as provider:
        with pytest.raises(RoutingError):
            await provider.route(RouteRequest(origin=(0, 0), destination=(1, 1)))


@pytest.mark.asyncio
async def test_network_error_raises_routing_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("down", request=request)

    async with _provider(handler) as provider:
        with pytest.raises(RoutingError, match="routing request failed"):
            await provider.route(RouteRequest(origin=(0, 0), destination=(1, 1)))
