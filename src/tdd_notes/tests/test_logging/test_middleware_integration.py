import json
import logging
import uuid

import pytest
from fastapi import FastAPI
from starlette.testclient import TestClient

from tdd_notes.core.logging.builder import setup_logging
from tdd_notes.core.logging.filters import get_request_id
from tdd_notes.core.logging.middleware import RequestIDMiddleware, resolve_request_id
from tdd_notes.tests.test_fixtures.settings import make_test_settings


@pytest.fixture(autouse=True)
def restore_logging(test_settings):
    yield
    setup_logging(test_settings)


def make_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestIDMiddleware)

    @app.get("/hello")
    async def hello():
        logging.getLogger("tdd_notes.tests").info("handling hello")
        return {"request_id": get_request_id()}

    return app


def test_resolve_request_id():
    assert resolve_request_id("abc.DEF_123-x") == "abc.DEF_123-x"
    for bad in (None, "", "has space", "x" * 129, "new\nline"):
        generated = resolve_request_id(bad)
        assert str(uuid.UUID(generated)) == generated


def test_generated_request_id_in_response():
    with TestClient(make_app()) as client:
        resp = client.get("/hello")

    rid = resp.headers["X-Request-ID"]
    assert resp.json() == {"request_id": rid}
    assert str(uuid.UUID(rid)) == rid


def test_unsafe_incoming_request_id_is_replaced():
    with TestClient(make_app()) as client:
        resp = client.get("/hello", headers={"X-Request-ID": "<script>"})

    assert resp.headers["X-Request-ID"] != "<script>"


def test_request_id_in_response_and_logs(capsys):
    setup_logging(make_test_settings(LOG_FORMAT="json"))

    with TestClient(make_app()) as client:
        resp = client.get("/hello", headers={"X-Request-ID": "trace-1"})

    assert resp.headers["X-Request-ID"] == "trace-1"

    stderr = capsys.readouterr().err
    records = []
    for line in stderr.splitlines():
        try:
            records.append(json.loads(line))
        except ValueError:
            continue
    assert any(r.get("message") == "handling hello" and r.get("request_id") == "trace-1" for r in records)
