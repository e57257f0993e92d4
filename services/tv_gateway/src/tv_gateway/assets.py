"""
Asset routes: the redirect resolver and the existence gate.

``/web/*`` and ``/assets/<folder>/*`` always answer with one 302 to the
terminal ``/assets/<canonical>`` shape; the terminal route serves the file
or a plain-text 404.
"""
from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import quote

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse, PlainTextResponse, RedirectResponse

import core_metrics
from core_config.constants import SERVICE_NAME
from core_logging import get_logger, log_stage, current_request_id
from core_logging.error_codes import ErrorCode

from .canonical import UnsafeAssetPath, canonicalize, canonicalize_terminal, ensure_safe

logger = get_logger("tv_gateway.assets")

router = APIRouter()

NOT_FOUND_MESSAGE = "File not found"
UNSAFE_PATH_MESSAGE = "Invalid asset path"


def asset_location(canonical: str) -> str:
    return f"/assets/{quote(canonical)}"


def resolve_asset(root: Path, canonical: str) -> Path | None:
    """
    Existing regular file named ``canonical`` directly under ``root``, or
    ``None``. The resolved path must stay inside the resolved root.
    """
    base = root.resolve()
    candidate = (base / canonical).resolve()
    if not candidate.is_relative_to(base):
        return None
    if not candidate.is_file():
        return None
    return candidate


async def unsafe_asset_path_handler(request: Request, exc: UnsafeAssetPath):
    log_stage(logger, "assets", "unsafe_path",
              level=logging.WARNING,
              request_id=current_request_id(),
              error_code=ErrorCode.unsafe_asset_path.value,
              path=request.url.path, reason=exc.reason)
    return PlainTextResponse(UNSAFE_PATH_MESSAGE, status_code=400)


def _redirect(raw: str) -> RedirectResponse:
    canonical = canonicalize(raw)
    location = asset_location(canonical)
    log_stage(logger, "assets", "redirect",
              request_id=current_request_id(), source=raw, location=location)
    return RedirectResponse(location, status_code=302)


@router.api_route("/web/{raw:path}", methods=["GET", "HEAD"])
async def web_redirect(raw: str):
    return _redirect(raw)


@router.api_route("/assets/{folder}/{rest:path}", methods=["GET", "HEAD"])
async def folder_redirect(folder: str, rest: str):
    return _redirect(rest)


@router.api_route("/assets/{filename}", methods=["GET", "HEAD"])
async def serve_asset(request: Request, filename: str):
    canonical = canonicalize_terminal(filename)
    root: Path = request.app.state.settings.assets_dir
    found = resolve_asset(root, canonical)
    if found is None and canonical != filename:
        # Redirect targets are already stripped; a stored name that itself
        # starts with eight hex characters must not lose them a second time.
        found = resolve_asset(root, ensure_safe(filename))
    if found is None:
        core_metrics.counter(f"{SERVICE_NAME}_assets_not_found_total", 1)
        log_stage(logger, "assets", "not_found",
                  level=logging.WARNING,
                  request_id=current_request_id(),
                  error_code=ErrorCode.asset_not_found.value,
                  path=str(root / canonical))
        return PlainTextResponse(NOT_FOUND_MESSAGE, status_code=404)
    return FileResponse(found)
