from enum import Enum

class ErrorCode(str, Enum):
    """
    Canonical error classes used in log lines and metric labels.
    Response bodies stay in the flat ``{"error": ..., "details": ...}`` shape
    the TV client expects; these codes never reach the client.
    """
    validation_failed   = "validation_failed"
    unsafe_asset_path   = "unsafe_asset_path"
    asset_not_found     = "asset_not_found"
    upstream_error      = "upstream_error"
    upstream_timeout    = "upstream_timeout"
    telemetry_suppressed = "telemetry_suppressed"
    internal            = "internal"

__all__ = ["ErrorCode"]
