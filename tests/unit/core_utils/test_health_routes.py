from fastapi import FastAPI
from fastapi.testclient import TestClient

from core_utils.health import attach_health_routes


def _raise_oserror():
    raise OSError("disk gone")


def test_defaults_without_checks():
    app = FastAPI()
    attach_health_routes(app, checks={})
    client = TestClient(app)
    assert client.get("/healthz").json() == {"status": "ok"}
    assert client.get("/readyz").json() == {"ready": True}


def test_async_and_dict_checks():
    async def _ready():
        return {"ready": True, "assets": "ok"}

    app = FastAPI()
    attach_health_routes(app, checks={"liveness": lambda: False, "readiness": _ready})
    client = TestClient(app)
    assert client.get("/healthz").json() == {"status": "fail"}
    assert client.get("/readyz").json() == {"ready": True, "assets": "ok"}


def test_os_errors_mean_not_ready():
    app = FastAPI()
    attach_health_routes(app, checks={"readiness": _raise_oserror})
    assert TestClient(app).get("/readyz").json() == {"ready": False}
