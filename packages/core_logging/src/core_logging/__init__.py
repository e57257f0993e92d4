from .logger import (
    get_logger,
    log_stage,
    bind_request_id,
    current_request_id,
)

__all__ = [
    "get_logger",
    "log_stage",
    "bind_request_id",
    "current_request_id",
]
