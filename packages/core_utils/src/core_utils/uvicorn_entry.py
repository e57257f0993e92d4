import os
from typing import Optional

import uvicorn

_TRUTHY = ("1", "true", "yes", "on")


def run(
    app_path: str,
    port: int,
    *,
    host: Optional[str] = None,
    factory: bool = False,
    log_level: Optional[str] = None,
    access_log: Optional[bool] = None,
) -> None:
    """
    Serve *app_path* with uvicorn. Unset options fall back to the ``HOST``,
    ``LOG_LEVEL`` and ``ACCESS_LOG`` environment variables. Uvicorn's own
    access log stays off by default: request lines already come from the
    structured request logger.
    """
    if access_log is None:
        access_log = os.getenv("ACCESS_LOG", "0").lower() in _TRUTHY
    uvicorn.run(
        app_path,
        host=host or os.getenv("HOST", "0.0.0.0"),
        port=port,
        factory=factory,
        log_level=(log_level or os.getenv("LOG_LEVEL", "info")).lower(),
        access_log=access_log,
    )


__all__ = ["run"]
