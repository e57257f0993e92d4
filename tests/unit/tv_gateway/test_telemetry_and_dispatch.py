import json

import httpx

from core_config.constants import TELEMETRY_PARAMS
from core_http.errors import UpstreamError
from tests.helpers.upstream_fakes import TELEMETRY_BASE
from tv_gateway.proxy import dispatch
from tv_gateway.upstream import UpstreamResponse


def test_gen_204_sends_fixed_identity(client, upstream):
    upstream.reply(204)
    res = client.get("/gen_204")
    assert res.status_code == 200

    sent = upstream.last
    assert sent.method == "GET"
    assert str(sent.url).startswith(f"{TELEMETRY_BASE}/gen_204?")
    assert dict(sent.url.params) == TELEMETRY_PARAMS


def test_device_204_hits_its_own_beacon(client, upstream):
    res = client.get("/device_204")
    assert res.status_code == 200
    assert upstream.last.url.path == "/device_204"


def test_beacon_ignores_client_query(client, upstream):
    client.get("/gen_204?label=spoofed")
    assert upstream.last.url.params["label"] == TELEMETRY_PARAMS["label"]


def test_unreachable_beacon_is_still_200(client, upstream):
    upstream.fail(httpx.ConnectError("connection refused"))
    res = client.get("/gen_204")
    assert res.status_code == 200
    assert res.json() == {"status": "Failed to fetch data from YouTube"}


def test_beacon_upstream_error_status_is_still_200(client, upstream):
    upstream.reply(500)
    res = client.get("/device_204")
    assert res.status_code == 200
    assert res.json() == {"status": "Failed to fetch data from YouTube"}


async def _ok() -> UpstreamResponse:
    return UpstreamResponse(status_code=200, content=b'{"ok":true}', media_type="application/json")


async def _fails(message: str) -> UpstreamResponse:
    raise UpstreamError(message)


async def test_dispatch_passes_success_through():
    res = await dispatch(_ok(), endpoint="browse")
    assert res.status_code == 200
    assert res.body == b'{"ok":true}'
    assert res.media_type == "application/json"


async def test_dispatch_without_failure_message_relays_error():
    res = await dispatch(_fails("boom"), endpoint="guide")
    assert res.status_code == 500
    assert json.loads(res.body) == {"error": "boom"}


async def test_dispatch_blank_upstream_message_gets_default_details():
    res = await dispatch(_fails(""), endpoint="next", failure_message="Failed to fetch data from YouTube /next API.")
    assert res.status_code == 500
    assert json.loads(res.body) == {
        "error": "Failed to fetch data from YouTube /next API.",
        "details": "No additional details available.",
    }
