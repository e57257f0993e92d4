from .health import attach_health_routes
from .ids import generate_request_id, accept_request_id
from .uvicorn_entry import run
from . import jsonx

__all__ = [
    "attach_health_routes",
    "generate_request_id",
    "accept_request_id",
    "run",
    "jsonx",
]
