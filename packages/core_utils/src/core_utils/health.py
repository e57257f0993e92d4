"""
core_utils.health – /healthz and /readyz for FastAPI services.
"""

import asyncio
from typing import Awaitable, Callable, Mapping, Optional, Union

from fastapi import APIRouter, FastAPI

# A check returns a bool, a dict (used as the JSON body), or an awaitable of either
HealthResult = Union[bool, dict]
HealthCheck = Callable[[], Union[HealthResult, Awaitable[HealthResult]]]


async def _run_check(fn: Optional[HealthCheck]) -> HealthResult:
    if fn is None:
        return True
    try:
        res = fn()
        if asyncio.iscoroutine(res):
            res = await res
    except OSError:
        # An unreadable file system counts as a failed probe, not a 500
        return False
    return res


def attach_health_routes(app: FastAPI, *, checks: Mapping[str, HealthCheck]) -> None:
    """
    Wire ``GET /healthz`` (``checks["liveness"]``) and ``GET /readyz``
    (``checks["readiness"]``). A missing check always passes.

    Bool results render as ``{"status": "ok" | "fail"}`` for liveness and
    ``{"ready": <bool>}`` for readiness; dict results are returned as is.
    """
    router = APIRouter()
    liveness = checks.get("liveness")
    readiness = checks.get("readiness")

    @router.get("/healthz", include_in_schema=False)
    async def _healthz():
        res = await _run_check(liveness)
        if isinstance(res, dict):
            return res
        return {"status": "ok" if res else "fail"}

    @router.get("/readyz", include_in_schema=False)
    async def _readyz():
        res = await _run_check(readiness)
        if isinstance(res, dict):
            return res
        return {"ready": bool(res)}

    app.include_router(router)
