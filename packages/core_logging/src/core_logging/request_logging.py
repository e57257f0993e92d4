from __future__ import annotations
import time
from typing import Tuple
from fastapi import FastAPI, Request
from core_logging import get_logger, log_stage, bind_request_id
from core_config.constants import REQUEST_LOG_SUPPRESS_PATHS
from core_utils.ids import accept_request_id
import core_metrics


def attach_request_logging(
    app: FastAPI,
    *,
    service: str,
    metric_prefix: str,
    suppress_paths: Tuple[str, ...] = REQUEST_LOG_SUPPRESS_PATHS,
) -> None:
    """
    Per-request breadcrumbs and request metrics.

    Every request gets an ``x-request-id`` (the caller's when printable, a
    fresh one otherwise) bound for the duration of the request and echoed on
    the response. ``http.server.request`` / ``http.server.response`` lines
    are skipped for *suppress_paths*; metrics are recorded for all paths:

      - {metric_prefix}_ttfb_seconds (histogram)
      - {metric_prefix}_http_requests_total (counter{method,code})
      - {metric_prefix}_http_5xx_total (counter)
    """
    logger = get_logger(service)
    ttfb_metric = f"{metric_prefix}_ttfb_seconds"
    requests_metric = f"{metric_prefix}_http_requests_total"
    errors_metric = f"{metric_prefix}_http_5xx_total"

    @app.middleware("http")
    async def _request_logger(request: Request, call_next):
        path = request.url.path or "/"
        quiet = path in suppress_paths
        req_id = accept_request_id(request.headers.get("x-request-id"))
        bind_request_id(req_id)

        if not quiet:
            log_stage(logger, "http.server", "http.server.request",
                      request_id=req_id, method=request.method, path=path)

        t0 = time.perf_counter()
        resp = await call_next(request)
        elapsed = time.perf_counter() - t0
        resp.headers["x-request-id"] = req_id

        code = resp.status_code
        core_metrics.histogram(ttfb_metric, elapsed)
        core_metrics.counter(requests_metric, 1, method=request.method, code=str(code))
        if code >= 500:
            core_metrics.counter(errors_metric, 1)

        if not quiet:
            log_stage(logger, "http.server", "http.server.response",
                      request_id=req_id, method=request.method, path=path,
                      status_code=code, latency_ms=int(elapsed * 1000.0))
        return resp
