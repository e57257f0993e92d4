"""
Shared fixtures for the gateway tests.

Every test gets a throw-away public root under ``tmp_path`` and a gateway
whose upstream client talks to ``httpx.MockTransport`` instead of the real
platform.
"""
from __future__ import annotations

import asyncio

import pytest
from fastapi.testclient import TestClient

from core_config import Settings
from tests.helpers.upstream_fakes import (
    INNERTUBE_BASE,
    TELEMETRY_BASE,
    VIDEO_INFO_URL,
    UpstreamRecorder,
)
from tv_gateway.app import create_app
from tv_gateway.upstream import UpstreamClient


@pytest.fixture
def public_root(tmp_path):
    root = tmp_path / "public"
    assets = root / "assets"
    assets.mkdir(parents=True)
    (assets / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\nfake")
    (assets / "app.js").write_text("console.log('tv');")
    (root / "index.html").write_text("<!DOCTYPE html><title>TV</title>")
    return root


@pytest.fixture
def settings(public_root):
    return Settings(
        public_root=public_root,
        innertube_base_url=INNERTUBE_BASE,
        innertube_api_key=None,
        video_info_url=VIDEO_INFO_URL,
        telemetry_base_url=TELEMETRY_BASE,
    )


@pytest.fixture
def upstream():
    return UpstreamRecorder()


@pytest.fixture
def client(settings, upstream):
    upstream_client = UpstreamClient(settings, transport=upstream.transport())
    app = create_app(settings, upstream=upstream_client)
    with TestClient(app) as c:
        yield c
    asyncio.run(upstream_client.aclose())
