from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import FileResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles

from core_config import Settings, get_settings
from core_config.constants import SERVICE_NAME
from core_http.errors import ClientInputError, attach_standard_error_handlers
from core_logging import get_logger, log_stage
from core_metrics import counter as metric_counter
from core_utils.fastapi_bootstrap import setup_service
from core_utils.health import attach_health_routes

from . import assets, proxy
from .canonical import UnsafeAssetPath
from .upstream import UpstreamClient

logger = get_logger(SERVICE_NAME)

THUMBNAIL_MISSING_MESSAGE = "Video ID is required."


def thumbnail_url(settings: Settings, video_id: str) -> str:
    return f"{settings.thumbnail_base_url.rstrip('/')}/{video_id}/hqdefault.jpg"


def create_app(settings: Optional[Settings] = None, upstream: Optional[UpstreamClient] = None) -> FastAPI:
    """
    Build the gateway application.

    ``upstream`` is for callers that own their own client (tests inject one
    backed by ``httpx.MockTransport``); when omitted, the lifespan creates
    the client on startup and closes it on shutdown.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
        settings.logs_dir.mkdir(parents=True, exist_ok=True)
        owned = app.state.upstream is None
        if owned:
            app.state.upstream = UpstreamClient(settings)
        # Prime metric families so the first scrape is not empty
        metric_counter(f"{SERVICE_NAME}_http_5xx_total", 0)
        metric_counter(f"{SERVICE_NAME}_assets_not_found_total", 0)
        log_stage(
            logger, "init", "config",
            request_id="startup",
            environment=settings.environment,
            port=settings.port,
            assets_dir=str(settings.assets_dir),
            logs_dir=str(settings.logs_dir),
            innertube_base_url=settings.innertube_base_url,
            upstream_injected=not owned,
        )
        try:
            yield
        finally:
            if owned:
                await app.state.upstream.aclose()
                app.state.upstream = None
            log_stage(logger, "init", "shutdown", request_id="shutdown")

    app = FastAPI(title="TV Gateway", version="0.1.0", lifespan=_lifespan)
    app.state.settings = settings
    app.state.upstream = upstream

    setup_service(app, SERVICE_NAME)
    attach_standard_error_handlers(app, service=SERVICE_NAME)
    app.add_exception_handler(UnsafeAssetPath, assets.unsafe_asset_path_handler)
    for root_name in (SERVICE_NAME, "core_http"):
        get_logger(root_name, level=settings.service_log_level)
    attach_health_routes(app, checks={
        "liveness": (lambda: True),
        "readiness": (lambda: settings.assets_dir.is_dir()),
    })

    @app.get("/", include_in_schema=False)
    async def root_document():
        if not settings.index_file.is_file():
            return PlainTextResponse(assets.NOT_FOUND_MESSAGE, status_code=404)
        return FileResponse(settings.index_file)

    @app.get("/get-thumbnail")
    async def get_thumbnail(request: Request):
        video_id = request.query_params.get("videoId")
        if not video_id or not video_id.strip():
            raise ClientInputError(THUMBNAIL_MISSING_MESSAGE)
        return {"thumbnailUrl": thumbnail_url(settings, video_id)}

    app.include_router(assets.router)
    app.include_router(proxy.router)
    app.mount("/logs", StaticFiles(directory=str(settings.logs_dir), check_dir=False), name="logs")
    return app
