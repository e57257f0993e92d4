from __future__ import annotations
from fastapi import FastAPI, Response
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, CollectorRegistry, generate_latest


def attach_prometheus_endpoint(app: FastAPI, path: str = "/metrics", *,
                               registry: CollectorRegistry = REGISTRY) -> None:
    """
    Expose *registry* in the Prometheus text format at *path*. Idempotent:
    the route is registered under a stable name and a second call is a no-op.
    """
    route_name = f"core_metrics:{path}"
    if any(getattr(r, "name", None) == route_name for r in app.router.routes):
        return

    @app.get(path, include_in_schema=False, name=route_name)
    def _metrics() -> Response:
        return Response(generate_latest(registry), media_type=CONTENT_TYPE_LATEST)
