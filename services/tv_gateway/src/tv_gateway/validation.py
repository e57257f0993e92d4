from __future__ import annotations

from typing import Any, Mapping

from fastapi import Request

from core_http.errors import ClientInputError
from core_utils import jsonx

INVALID_JSON_MESSAGE = "Request body must be valid JSON."
NOT_AN_OBJECT_MESSAGE = "Request body must be a JSON object."


def is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def require_string(source: Mapping[str, Any], field: str, message: str) -> str:
    """
    Return ``source[field]`` when it is a string that is non-empty after
    trimming; raise ``ClientInputError(message)`` otherwise. The value is
    returned untrimmed so it is forwarded verbatim.
    """
    value = source.get(field)
    if not is_non_empty_string(value):
        raise ClientInputError(message)
    return value


async def read_json_object(request: Request) -> dict[str, Any]:
    """
    Parse the request body as a JSON object. An empty body is ``{}``.
    """
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        data = jsonx.loads(raw)
    except jsonx.JSONDecodeError as exc:
        raise ClientInputError(INVALID_JSON_MESSAGE) from exc
    if not isinstance(data, dict):
        raise ClientInputError(NOT_AN_OBJECT_MESSAGE)
    return data
