from .errors import ClientInputError, UpstreamError, error_response, attach_standard_error_handlers
from .client import build_async_client, send

__all__ = [
    "ClientInputError",
    "UpstreamError",
    "error_response",
    "attach_standard_error_handlers",
    "build_async_client",
    "send",
]
