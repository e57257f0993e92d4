"""orjson-backed JSON helpers shared by the error envelope and the body parser."""
from __future__ import annotations
from typing import Any, Mapping

import orjson

__all__ = ["loads", "sanitize", "JSONDecodeError"]

# A ValueError subclass, so callers may catch either
JSONDecodeError = orjson.JSONDecodeError

_BOM = b"\xef\xbb\xbf"


def sanitize(obj: Any) -> Any:
    """Coerce *obj* into plain JSON types.

    Exceptions become ``{"error": <type>, "message": <text>}``, bytes are
    decoded as UTF-8 with replacement, sets and tuples become lists and any
    other unknown object is rendered with ``str()``.
    """
    if obj is None or isinstance(obj, (str, int, float, bool)):
        return obj
    if isinstance(obj, Mapping):
        return {str(k): sanitize(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [sanitize(v) for v in obj]
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return bytes(obj).decode("utf-8", "replace")
    if isinstance(obj, BaseException):
        return {"error": type(obj).__name__, "message": str(obj)}
    return str(obj)


def loads(data: str | bytes) -> Any:
    """Parse JSON text or bytes; a leading UTF-8 byte-order mark is ignored."""
    raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
    return orjson.loads(raw[len(_BOM):] if raw.startswith(_BOM) else raw)
