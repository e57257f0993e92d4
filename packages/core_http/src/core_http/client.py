import time
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

import httpx

from core_http.errors import UpstreamError
from core_logging import get_logger, log_stage, current_request_id
from core_logging.error_codes import ErrorCode

# Module-level logger for this package
logger = get_logger("core_http")


def build_async_client(
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    headers: Optional[Dict[str, str]] = None,
) -> httpx.AsyncClient:
    """
    Return a new ``httpx.AsyncClient`` for upstream calls.

    Timeouts are left at the httpx defaults and redirects are followed. The
    caller owns the client and must ``aclose()`` it (the gateway does so
    from its lifespan handler).
    ``transport`` lets tests route every call through ``httpx.MockTransport``.
    """
    return httpx.AsyncClient(transport=transport, headers=headers, follow_redirects=True)


def _describe_transport_error(exc: httpx.HTTPError) -> str:
    text = str(exc).strip()
    return text or exc.__class__.__name__


async def send(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    params: Any = None,
    json: Any | None = None,
    headers: Optional[Dict[str, str]] = None,
    op: str,
) -> httpx.Response:
    """
    One upstream round-trip with request/response breadcrumbs.

    No retries. Raises ``UpstreamError`` on transport failure or on any
    non-2xx final status; returns the response untouched otherwise.
    """
    parts = urlsplit(url)
    http_meta = {
        "method": method.upper(),
        "scheme": parts.scheme or "http",
        "host": parts.hostname or "",
        "target": parts.path or "/",
    }
    log_stage(
        logger, "http.client", "http.client.request",
        request_id=current_request_id(),
        op=op,
        http=http_meta,
    )
    t0 = time.perf_counter()
    try:
        resp = await client.request(method.upper(), url, params=params, json=json, headers=headers)
    except httpx.TimeoutException as exc:
        raise UpstreamError(
            _describe_transport_error(exc), url=url, code=ErrorCode.upstream_timeout,
        ) from exc
    except httpx.HTTPError as exc:
        raise UpstreamError(_describe_transport_error(exc), url=url) from exc

    latency_ms = int((time.perf_counter() - t0) * 1000.0)
    log_stage(
        logger, "http.client", "http.client.response",
        request_id=current_request_id(),
        op=op,
        http={**http_meta, "status_code": resp.status_code},
        latency_ms=latency_ms,
    )
    if not 200 <= resp.status_code < 300:
        raise UpstreamError(
            f"Request failed with status code {resp.status_code}",
            status_code=resp.status_code,
            url=url,
        )
    return resp
