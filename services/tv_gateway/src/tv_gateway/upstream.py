"""
Upstream platform client.

Thin async wrappers around the platform's internal ``youtubei/v1`` API, the
legacy ``get_video_info`` endpoint and the telemetry beacon host. Payloads
are opaque: they are forwarded and returned as raw bytes, never parsed.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

import httpx

from core_config import Settings
from core_config.constants import INNERTUBE_ENDPOINTS, TELEMETRY_BEACONS, TELEMETRY_PARAMS
from core_http.client import build_async_client, send
from core_http.headers import CONTENT_TYPE, upstream_headers


_DEFAULT_MEDIA_TYPE = "application/json"


@dataclass(frozen=True)
class UpstreamResponse:
    status_code: int
    content: bytes
    media_type: str

    @classmethod
    def from_httpx(cls, resp: httpx.Response) -> "UpstreamResponse":
        return cls(
            status_code=resp.status_code,
            content=resp.content,
            media_type=resp.headers.get(CONTENT_TYPE) or _DEFAULT_MEDIA_TYPE,
        )


class UpstreamClient:
    """
    One shared ``httpx.AsyncClient`` per application instance.

    Every ``fetch_*`` returns an ``UpstreamResponse`` for 2xx answers and
    raises ``core_http.UpstreamError`` otherwise.
    """

    def __init__(self, settings: Settings, *, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self.settings = settings
        self._client = build_async_client(transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    # ------------------------------------------------------------------ #
    # InnerTube                                                          #
    # ------------------------------------------------------------------ #
    def innertube_url(self, endpoint: str) -> str:
        if endpoint not in INNERTUBE_ENDPOINTS:
            raise ValueError(f"unknown InnerTube endpoint: {endpoint}")
        return f"{self.settings.innertube_base_url.rstrip('/')}/youtubei/v1/{endpoint}"

    def _innertube_params(self) -> dict[str, str]:
        params = {"prettyPrint": "false"}
        if self.settings.innertube_api_key:
            params["key"] = self.settings.innertube_api_key
        return params

    async def _innertube(self, endpoint: str, fields: Mapping[str, Any],
                         inbound_headers: Mapping[str, str] | None = None) -> UpstreamResponse:
        # The gateway's context always wins over one a client might send.
        payload = {**fields, "context": self.settings.innertube_context}
        resp = await send(
            self._client, "POST", self.innertube_url(endpoint),
            params=self._innertube_params(),
            json=payload,
            headers=upstream_headers(inbound_headers, json_body=True),
            op=f"innertube.{endpoint}",
        )
        return UpstreamResponse.from_httpx(resp)

    async def fetch_browse(self, browse_id: str, *, inbound_headers: Mapping[str, str] | None = None) -> UpstreamResponse:
        return await self._innertube("browse", {"browseId": browse_id}, inbound_headers)

    async def fetch_guide(self, *, inbound_headers: Mapping[str, str] | None = None) -> UpstreamResponse:
        return await self._innertube("guide", {}, inbound_headers)

    async def fetch_next(self, params: str, video_id: str, *,
                         inbound_headers: Mapping[str, str] | None = None) -> UpstreamResponse:
        return await self._innertube("next", {"params": params, "videoId": video_id}, inbound_headers)

    async def fetch_search(self, body: Mapping[str, Any], *,
                           inbound_headers: Mapping[str, str] | None = None) -> UpstreamResponse:
        return await self._innertube("search", body, inbound_headers)

    # ------------------------------------------------------------------ #
    # Legacy endpoints                                                   #
    # ------------------------------------------------------------------ #
    async def fetch_video_info(self, query_string: str, *,
                               inbound_headers: Mapping[str, str] | None = None) -> UpstreamResponse:
        url = self.settings.video_info_url
        if query_string:
            url = f"{url}?{query_string}"
        resp = await send(
            self._client, "GET", url,
            headers=upstream_headers(inbound_headers),
            op="get_video_info",
        )
        return UpstreamResponse.from_httpx(resp)

    async def send_beacon(self, name: str) -> UpstreamResponse:
        if name not in TELEMETRY_BEACONS:
            raise ValueError(f"unknown telemetry beacon: {name}")
        resp = await send(
            self._client, "GET", f"{self.settings.telemetry_base_url.rstrip('/')}/{name}",
            params=TELEMETRY_PARAMS,
            headers=upstream_headers(),
            op=f"telemetry.{name}",
        )
        return UpstreamResponse.from_httpx(resp)
