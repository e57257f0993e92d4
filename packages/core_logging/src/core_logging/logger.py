"""
Structured JSON logging for the gateway.

One JSON object per line on the *current* ``sys.stdout``. The envelope keys
(``ts``, ``level``, ``service``, ``event`` and the few in ``_TOP_LEVEL``) sit at
the top of the object; every other extra is nested under ``meta``.
"""
import asyncio
import contextvars
import logging
import os
import sys
import time
from contextlib import contextmanager
from typing import Any, Dict, Optional

import orjson

# ────────────────────────────────────────────────────────────
# Request-scoped context
# ────────────────────────────────────────────────────────────
_REQUEST_ID: contextvars.ContextVar[Optional[str]] = \
    contextvars.ContextVar("_REQUEST_ID", default=None)


def bind_request_id(request_id: Optional[str]) -> None:
    """Bind *request_id* for every log line emitted from the current context."""
    _REQUEST_ID.set(request_id)


def current_request_id() -> Optional[str]:
    return _REQUEST_ID.get()


class _RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            rid = _REQUEST_ID.get()
            if rid:
                record.request_id = rid
        return True


# Attributes every LogRecord carries; extras must never overwrite them
_RESERVED: frozenset[str] = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

# Envelope keys kept at the top level; everything else goes under `meta`
_TOP_LEVEL: frozenset[str] = frozenset({
    "stage",
    "latency_ms",
    "request_id",
    "status_code",
    "path",
    "method",
})


def _json_default(obj: Any) -> Any:
    if isinstance(obj, (bytes, bytearray)):
        return bytes(obj).decode("utf-8", errors="replace")
    if isinstance(obj, os.PathLike):
        return os.fspath(obj)
    if isinstance(obj, BaseException):
        return f"{obj.__class__.__name__}: {obj}"
    return str(obj)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        created = getattr(record, "created", time.time())
        envelope: Dict[str, Any] = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(created)) + f".{int(record.msecs):03d}Z",
            "level": record.levelname,
            "service": os.getenv("SERVICE_NAME", record.name),
            "event": record.getMessage(),
        }

        meta: Dict[str, Any] = {}
        for key, val in vars(record).items():
            if key in _RESERVED:
                continue
            if key == "message_extra":
                envelope["message"] = val
            elif key in _TOP_LEVEL:
                envelope[key] = val
            else:
                meta[key] = val

        if record.exc_info:
            meta["exc"] = self.formatException(record.exc_info)
        if meta:
            envelope["meta"] = meta

        return orjson.dumps(envelope, default=_json_default).decode("utf-8")


def _sanitize_extra(extra: Dict[str, Any] | None) -> Dict[str, Any]:
    """
    Make *extra* safe for ``Logger.makeRecord``: a ``message`` extra becomes
    ``message_extra``, any other LogRecord attribute is prefixed with
    ``meta_``, and a nested ``meta`` dict is flattened one level.
    """
    if not extra:
        return {}
    items = []
    for key, val in extra.items():
        if key == "meta" and isinstance(val, dict):
            items.extend((str(k), v) for k, v in val.items())
        else:
            items.append((str(key), val))

    safe: Dict[str, Any] = {}
    for key, val in items:
        if key == "message":
            safe["message_extra"] = val
        elif key in _RESERVED:
            safe[f"meta_{key}"] = val
        else:
            safe[key] = val
    return safe


class StructuredLogger(logging.Logger):
    """
    ``logging.Logger`` that accepts arbitrary keyword arguments
    (``logger.warning("not_found", path=...)``) and merges them into ``extra``.
    """

    def _log(                                   # noqa: PLR0913 – keep signature
        self,
        level: int,
        msg: str,
        args,
        exc_info=None,
        extra: Dict[str, Any] | None = None,
        stack_info: bool = False,
        stacklevel: int = 1,
        **kwargs: Any,
    ) -> None:
        if kwargs:
            extra = {**(extra or {}), **kwargs}
        super()._log(
            level,
            msg,
            args,
            exc_info=exc_info,
            extra=_sanitize_extra(extra),
            stack_info=stack_info,
            stacklevel=stacklevel,
        )


class DynamicStdoutHandler(logging.StreamHandler):
    """Writes to whatever ``sys.stdout`` is at emit time (capsys, redirect_stdout)."""

    def emit(self, record: logging.LogRecord) -> None:  # noqa: D401
        self.setStream(sys.stdout)
        super().emit(record)


logging.setLoggerClass(StructuredLogger)


def get_logger(name: str = "tv_gateway", level: str | None = None) -> logging.Logger:
    """
    Service roots (names without a dot) own the JSON handler and stop
    propagation; dotted module loggers carry no handler and bubble up to
    their service root.

    An explicit ``level`` always applies. Otherwise a root takes
    ``SERVICE_LOG_LEVEL`` on first use and keeps whatever level it was given
    later, and a dotted logger stays ``NOTSET`` so it follows its root.
    """
    logger = logging.getLogger(name)

    if "." not in name:
        if not any(isinstance(h, DynamicStdoutHandler) for h in logger.handlers):
            handler = DynamicStdoutHandler()
            handler.setFormatter(JsonFormatter())
            logger.addHandler(handler)
        logger.propagate = False
        if level is None and logger.level == logging.NOTSET:
            level = os.getenv("SERVICE_LOG_LEVEL", "INFO")
    else:
        for h in list(logger.handlers):
            logger.removeHandler(h)
        logger.propagate = True
        if level is None:
            logger.setLevel(logging.NOTSET)

    if level is not None:
        logger.setLevel(level.upper() if isinstance(level, str) else level)
    if not any(isinstance(f, _RequestIdFilter) for f in logger.filters):
        logger.addFilter(_RequestIdFilter())
    return logger


def _emit_stage_log(logger: logging.Logger, stage: str, event: str, *, level: int = logging.INFO, **extras: Any):
    logger.log(level, event, extra=_sanitize_extra({"stage": stage, **extras}))


def log_stage(logger: logging.Logger, stage: str, event: str, *, level: int = logging.INFO, **fixed: Any):
    """
    *Imperative*  →  log_stage(logger, "proxy", "upstream_failed", endpoint="next")
    *Decorator*   →  @log_stage(logger, "upstream", "browse")
                     async def fetch_browse(...): ...
    *Context*     →  with log_stage(logger, "assets", "serve").ctx(path=p): ...

    The imperative line is emitted on every call; the decorator and the
    context manager add ``<event>.done`` lines carrying ``latency_ms``.
    """
    _emit_stage_log(logger, stage, event, level=level, **fixed)

    def _done(t0: float, fields: Dict[str, Any]) -> None:
        _emit_stage_log(
            logger, stage, f"{event}.done",
            latency_ms=(time.perf_counter() - t0) * 1000,
            **fields,
        )

    def _decorator(fn):
        if asyncio.iscoroutinefunction(fn):
            async def _aw(*a, **kw):
                t0 = time.perf_counter()
                try:
                    return await fn(*a, **kw)
                finally:
                    _done(t0, fixed)
            return _aw

        def _w(*a, **kw):
            t0 = time.perf_counter()
            try:
                return fn(*a, **kw)
            finally:
                _done(t0, fixed)
        return _w

    @contextmanager
    def _ctx(**dynamic):
        fields = {**fixed, **dynamic}
        _emit_stage_log(logger, stage, f"{event}.start", **fields)
        t0 = time.perf_counter()
        try:
            yield
        finally:
            _done(t0, fields)

    _decorator.ctx = _ctx
    return _decorator
