# src/gamerlink/tests/test_logging/test_middleware_integration.py
import json
import logging

from fastapi import FastAPI
from starlette.testclient import TestClient

from gamerlink.core.logging.builder import setup_logging
from gamerlink.core.logging.middleware import RequestIDMiddleware


def build_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestIDMiddleware)

    @app.get("/hello")
    def hello():
        logging.getLogger("gamerlink.test").info("handling hello")
        return {"ok": True}

    return app


def test_request_id_in_response_and_logs(make_settings, capsys):
    setup_logging(make_settings(LOG_FORMAT="json", LOG_TO_STDOUT=True))

    resp = TestClient(build_app()).get("/hello")

    assert resp.status_code == 200
    rid = resp.headers["X-Request-ID"]

    records = []
    for line in capsys.readouterr().err.splitlines():
        try:
            records.append(json.loads(line))
        except json.JSONDecodeError:
            continue
    assert any(r.get("request_id") == rid and r.get("message") == "handling hello" for r in records)


def test_incoming_request_id_is_echoed():
    resp = TestClient(build_app()).get("/hello", headers={"X-Request-ID": "upstream-42"})

    assert resp.headers["X-Request-ID"] == "upstream-42"


def test_unsafe_incoming_request_id_is_replaced():
    resp = TestClient(build_app()).get("/hello", headers={"X-Request-ID": "x" * 300})

    rid = resp.headers["X-Request-ID"]
    assert rid != "x" * 300
    assert len(rid) == 36  # fresh uuid4
