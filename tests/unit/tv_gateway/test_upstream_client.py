import httpx
import pytest

from core_config import Settings
from core_http.errors import UpstreamError
from core_logging.error_codes import ErrorCode
from tests.helpers.upstream_fakes import INNERTUBE_BASE, VIDEO_INFO_URL, UpstreamRecorder
from tv_gateway.upstream import UpstreamClient


@pytest.fixture
def recorder():
    return UpstreamRecorder()


def _client(recorder, **overrides) -> UpstreamClient:
    settings = Settings(
        innertube_base_url=INNERTUBE_BASE,
        video_info_url=VIDEO_INFO_URL,
        **overrides,
    )
    return UpstreamClient(settings, transport=recorder.transport())


async def test_api_key_is_sent_when_configured(recorder):
    upstream = _client(recorder, innertube_api_key="k-123")
    try:
        await upstream.fetch_guide()
    finally:
        await upstream.aclose()
    assert recorder.last.url.params["key"] == "k-123"
    assert recorder.last.headers["content-type"] == "application/json"
    assert "Cobalt" in recorder.last.headers["user-agent"]


async def test_response_keeps_raw_bytes_and_content_type(recorder):
    recorder.reply(200, content=b"\x00opaque", headers={"content-type": "application/octet-stream"})
    upstream = _client(recorder)
    try:
        resp = await upstream.fetch_browse("FEtopics")
    finally:
        await upstream.aclose()
    assert resp.status_code == 200
    assert resp.content == b"\x00opaque"
    assert resp.media_type == "application/octet-stream"


async def test_video_info_without_query_hits_bare_url(recorder):
    upstream = _client(recorder)
    try:
        await upstream.fetch_video_info("")
    finally:
        await upstream.aclose()
    assert str(recorder.last.url) == VIDEO_INFO_URL


async def test_timeout_is_classified(recorder):
    recorder.fail(httpx.ReadTimeout("timed out"))
    upstream = _client(recorder)
    try:
        with pytest.raises(UpstreamError) as info:
            await upstream.fetch_guide()
    finally:
        await upstream.aclose()
    assert info.value.code is ErrorCode.upstream_timeout
    assert info.value.message == "timed out"


async def test_non_2xx_carries_status(recorder):
    recorder.reply(502)
    upstream = _client(recorder)
    try:
        with pytest.raises(UpstreamError) as info:
            await upstream.fetch_next("CgIQBg", "abc")
    finally:
        await upstream.aclose()
    assert info.value.status_code == 502
    assert info.value.message == "Request failed with status code 502"


async def test_redirects_are_followed(recorder):
    def _handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "elsewhere.test":
            return httpx.Response(200, json={"moved": True})
        return httpx.Response(302, headers={"location": "https://elsewhere.test/get_video_info"})

    recorder.handler = _handler
    upstream = _client(recorder)
    try:
        resp = await upstream.fetch_video_info("video_id=abc")
    finally:
        await upstream.aclose()
    assert resp.status_code == 200
    assert len(recorder.requests) == 2


async def test_3xx_without_location_is_a_failure(recorder):
    recorder.reply(304)
    upstream = _client(recorder)
    try:
        with pytest.raises(UpstreamError) as info:
            await upstream.fetch_guide()
    finally:
        await upstream.aclose()
    assert info.value.status_code == 304


def test_unknown_endpoints_are_refused(recorder):
    upstream = _client(recorder)
    with pytest.raises(ValueError):
        upstream.innertube_url("player")


async def test_unknown_beacon_is_refused(recorder):
    upstream = _client(recorder)
    try:
        with pytest.raises(ValueError):
            await upstream.send_beacon("log_event")
    finally:
        await upstream.aclose()
    assert recorder.requests == []
