"""
core_utils.fastapi_bootstrap – the wiring every service applies to its app.

Request logging and metrics always; ``/metrics`` unless disabled; CORS and
reverse-proxy header handling driven by environment knobs:

  CORS_ORIGINS    comma/space separated origins; unset or empty disables CORS
  PROXY_HEADERS   "1" (default) trusts X-Forwarded-* from a fronting proxy

Health routes are attached by each service with
``core_utils.health.attach_health_routes`` since only the service knows
what "ready" means.
"""
from __future__ import annotations
import os, re
from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from core_logging.request_logging import attach_request_logging
from core_metrics.fastapi import attach_prometheus_endpoint

_TRUTHY = ("1", "true", "yes", "on")


def cors_origins(raw: str | None) -> list[str]:
    return [p for p in re.split(r"[\s,]+", raw or "") if p]


def setup_service(
    app: FastAPI,
    service_name: str,
    *,
    enable_cors_env: str = "CORS_ORIGINS",
    attach_metrics_endpoint: bool = True,
) -> None:
    attach_request_logging(app, service=service_name, metric_prefix=service_name)
    if attach_metrics_endpoint:
        attach_prometheus_endpoint(app)

    origins = cors_origins(os.getenv(enable_cors_env))
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
            expose_headers=["x-request-id"],
        )

    if os.getenv("PROXY_HEADERS", "1").lower() in _TRUTHY:
        app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")


__all__ = ["setup_service", "cors_origins"]
