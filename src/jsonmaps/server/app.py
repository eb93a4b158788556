"""HTTP endpoints backing the map client: CORS fetch proxy and tile-archive metadata."""

from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse, Response

from jsonmaps.contracts.config import JsonMapsConfig
from jsonmaps.contracts.exceptions import JsonMapsError
from jsonmaps.ingest._retrying_transport import RetryingTransport
from jsonmaps.server.tiles import HttpTileArchiveReader, TileArchiveReader

logger = logging.getLogger("jsonmaps.server")

router = APIRouter(prefix="/api", tags=["proxy"])

PROXY_CACHE_CONTROL = "public, max-age=300"
TILE_META_CACHE_CONTROL = "public, s-maxage=3600, stale-while-revalidate=86400"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get("/proxy")
async def proxy(request: Request, url: str | None = None) -> Response:
    if not url:
        return _error(400, "Missing url parameter")

    config: JsonMapsConfig = request.app.state.config
    transport: httpx.AsyncBaseTransport | None = request.app.state.transport
    try:
        async with httpx.AsyncClient(
            transport=RetryingTransport(transport=transport, max_retries=config.max_retries),
            timeout=httpx.Timeout(config.request_timeout),
            follow_redirects=True,
        ) as client:
            upstream = await client.get(url)
    except httpx.HTTPError as exc:
        logger.warning("Proxy fetch of %s failed: %s", url, exc)
        return _error(502, f"Fetch failed: {str(exc) or type(exc).__name__}")

    if upstream.status_code >= 400:
        return _error(upstream.status_code, f"Upstream returned {upstream.status_code}")

    body = upstream.content
    return Response(
        content=body,
        media_type=upstream.headers.get("content-type", "application/octet-stream"),
        headers={
            "Content-Length": str(len(body)),
            "Cache-Control": PROXY_CACHE_CONTROL,
        },
    )


@router.get("/tile-archive-meta")
async def tile_archive_meta(request: Request, url: str | None = None) -> Response:
    if not url:
        return _error(400, "Missing `url` query parameter")
    if not url.endswith(".pmtiles"):
        return _error(400, "URL must end with .pmtiles")

    reader: TileArchiveReader = request.app.state.tile_reader
    try:
        meta = await reader.read(url)
    except JsonMapsError as exc:
        logger.error("Failed to read tile archive %s: %s", url, exc)
        return _error(500, f"Failed to read PMTiles metadata: {exc}")

    return JSONResponse(
        content=meta.model_dump(mode="json", by_alias=True),
        headers={"Cache-Control": TILE_META_CACHE_CONTROL},
    )


def create_app(
    config: JsonMapsConfig | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    reader: TileArchiveReader | None = None,
) -> FastAPI:
    """Build the API application.

    *transport* is used for outbound proxy requests and by the default
    tile-archive reader.
    """
    config = config or JsonMapsConfig()
    app = FastAPI(title="jsonmaps API", version="0.1.0")
    app.state.config = config
    app.state.transport = transport
    app.state.tile_reader = reader or HttpTileArchiveReader(
        timeout=config.request_timeout,
        max_retries=config.max_retries,
        transport=transport,
    )
    app.include_router(router)

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    return app
