"""
Upstream proxy routes.

Each handler validates the few fields it needs, makes exactly one upstream
call through ``UpstreamClient`` and hands the outcome to ``dispatch`` (or
``forward_beacon`` for telemetry), which shapes the response.
"""
from __future__ import annotations

import logging
from typing import Awaitable

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

import core_metrics
from core_config.constants import SERVICE_NAME, TELEMETRY_FAILURE_STATUS
from core_http.errors import UpstreamError, error_response
from core_logging import get_logger, log_stage, current_request_id
from core_logging.error_codes import ErrorCode

from .upstream import UpstreamClient, UpstreamResponse
from .validation import read_json_object, require_string

logger = get_logger("tv_gateway.proxy")

router = APIRouter()

BROWSE_QUERY_MESSAGE = "Missing browseId parameter in the request."
BROWSE_BODY_MESSAGE = "Missing browseId parameter in the request body."
NEXT_PARAMS_MESSAGE = '"params" is required and must be a non-empty string.'
NEXT_VIDEO_ID_MESSAGE = '"videoId" is required and must be a non-empty string.'

NEXT_FAILURE_MESSAGE = "Failed to fetch data from YouTube /next API."
SEARCH_FAILURE_MESSAGE = "Failed to fetch data from YouTube /search API."
VIDEO_INFO_FAILURE_MESSAGE = "Failed to fetch video info."
NO_DETAILS_MESSAGE = "No additional details available."

_UPSTREAM_METRIC = f"{SERVICE_NAME}_upstream_requests_total"


def get_upstream(request: Request) -> UpstreamClient:
    return request.app.state.upstream


def passthrough(upstream: UpstreamResponse, *, status_code: int | None = None) -> Response:
    return Response(
        content=upstream.content,
        status_code=upstream.status_code if status_code is None else status_code,
        media_type=upstream.media_type,
    )


async def dispatch(
    call: Awaitable[UpstreamResponse],
    *,
    endpoint: str,
    failure_message: str | None = None,
) -> Response:
    """
    Await one upstream call and shape the outcome.

    Success mirrors the upstream status, body and content type. Failure is a
    500 envelope: ``{"error": <upstream message>}`` when no
    ``failure_message`` is given, else ``{"error": failure_message,
    "details": <upstream message>}``.
    """
    try:
        upstream = await call
    except UpstreamError as exc:
        core_metrics.counter(_UPSTREAM_METRIC, 1, endpoint=endpoint, outcome="error")
        log_stage(
            logger, "proxy", "upstream_failed",
            level=logging.WARNING,
            request_id=current_request_id(),
            endpoint=endpoint,
            error_code=exc.code.value,
            error=exc.message,
            upstream_status=exc.status_code,
        )
        if failure_message is None:
            return error_response(500, exc.message)
        return error_response(500, failure_message, details=exc.message or NO_DETAILS_MESSAGE)

    core_metrics.counter(_UPSTREAM_METRIC, 1, endpoint=endpoint, outcome="ok")
    return passthrough(upstream)


async def forward_beacon(upstream: UpstreamClient, name: str) -> Response:
    """
    Fire a telemetry beacon. Callers always get HTTP 200: the upstream body
    on success, a fixed status message when the beacon failed.
    """
    try:
        resp = await upstream.send_beacon(name)
    except UpstreamError as exc:
        core_metrics.counter(_UPSTREAM_METRIC, 1, endpoint=name, outcome="suppressed")
        log_stage(
            logger, "telemetry", "beacon_failed",
            level=logging.WARNING,
            request_id=current_request_id(),
            endpoint=name,
            error_code=ErrorCode.telemetry_suppressed.value,
            error=exc.message,
        )
        return JSONResponse(status_code=200, content={"status": TELEMETRY_FAILURE_STATUS})

    core_metrics.counter(_UPSTREAM_METRIC, 1, endpoint=name, outcome="ok")
    return passthrough(resp, status_code=200)


# ────────────────────────────────────────────────────────────────────────────
# InnerTube proxies
# ────────────────────────────────────────────────────────────────────────────

@router.get("/api/browse")
async def browse_get(request: Request, upstream: UpstreamClient = Depends(get_upstream)):
    browse_id = require_string(request.query_params, "browseId", BROWSE_QUERY_MESSAGE)
    return await dispatch(
        upstream.fetch_browse(browse_id, inbound_headers=request.headers),
        endpoint="browse",
    )


@router.post("/api/browse")
async def browse_post(request: Request, upstream: UpstreamClient = Depends(get_upstream)):
    body = await read_json_object(request)
    browse_id = require_string(body, "browseId", BROWSE_BODY_MESSAGE)
    return await dispatch(
        upstream.fetch_browse(browse_id, inbound_headers=request.headers),
        endpoint="browse",
    )


@router.api_route("/api/guide", methods=["GET", "POST"])
async def guide(request: Request, upstream: UpstreamClient = Depends(get_upstream)):
    return await dispatch(upstream.fetch_guide(inbound_headers=request.headers), endpoint="guide")


@router.post("/api/next")
async def next_(request: Request, upstream: UpstreamClient = Depends(get_upstream)):
    body = await read_json_object(request)
    params = require_string(body, "params", NEXT_PARAMS_MESSAGE)
    video_id = require_string(body, "videoId", NEXT_VIDEO_ID_MESSAGE)
    return await dispatch(
        upstream.fetch_next(params, video_id, inbound_headers=request.headers),
        endpoint="next",
        failure_message=NEXT_FAILURE_MESSAGE,
    )


@router.post("/api/search")
async def search(request: Request, upstream: UpstreamClient = Depends(get_upstream)):
    body = await read_json_object(request)
    return await dispatch(
        upstream.fetch_search(body, inbound_headers=request.headers),
        endpoint="search",
        failure_message=SEARCH_FAILURE_MESSAGE,
    )


# ────────────────────────────────────────────────────────────────────────────
# Legacy endpoints
# ────────────────────────────────────────────────────────────────────────────

@router.get("/get_video_info")
async def get_video_info(request: Request, upstream: UpstreamClient = Depends(get_upstream)):
    return await dispatch(
        upstream.fetch_video_info(request.url.query, inbound_headers=request.headers),
        endpoint="get_video_info",
        failure_message=VIDEO_INFO_FAILURE_MESSAGE,
    )


@router.get("/gen_204")
async def gen_204(upstream: UpstreamClient = Depends(get_upstream)):
    return await forward_beacon(upstream, "gen_204")


@router.get("/device_204")
async def device_204(upstream: UpstreamClient = Depends(get_upstream)):
    return await forward_beacon(upstream, "device_204")
