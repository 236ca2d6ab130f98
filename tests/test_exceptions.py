"""Tests for exception-to-status mapping and the JSON error body."""

from datetime import datetime

import pytest
from fastapi.exceptions import RequestValidationError
from fastapi.testclient import TestClient
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import (
    BadRequestError,
    NotFoundError,
    StorageError,
    ThirdPartyError,
    build_error_body,
    map_status,
)
from app.main import create_app


class TestMapStatus:

    @pytest.mark.parametrize(
        "exc, expected",
        [
            (NotFoundError("nf"), 404),
            (BadRequestError("br"), 400),
            (StorageError("disk", path="/tmp/x.csv"), 500),
            (ThirdPartyError("upstream"), 500),
            (StarletteHTTPException(status_code=418, detail="teapot"), 418),
            (RequestValidationError([]), 400),
            (RuntimeError("boom"), 500),
        ],
    )
    def test_status(self, exc, expected):
        assert map_status(exc) == expected


class TestBuildErrorBody:

    def test_shape(self):
        body = build_error_body(NotFoundError("Product id 1 doesn't exist"), "/products")

        assert set(body) == {"status", "error", "message", "path", "timestamp"}
        assert body["status"] == 404
        assert body["error"] == "Not Found"
        assert body["message"] == "Product id 1 doesn't exist"
        assert body["path"] == "/products"
        assert datetime.fromisoformat(body["timestamp"]).utcoffset() is not None

    def test_pass_through_status_keeps_detail(self):
        body = build_error_body(StarletteHTTPException(status_code=418, detail="teapot"), "/x")

        assert body["status"] == 418
        assert body["message"] == "teapot"

    def test_unclassified_surfaces_message(self):
        body = build_error_body(ValueError("something odd"), "/x")

        assert body["status"] == 500
        assert body["error"] == "Internal Server Error"
        assert body["message"] == "something odd"


def test_unhandled_exception_becomes_500_body():
    app = create_app("csv")

    @app.get("/explode")
    async def explode():
        raise RuntimeError("boom")

    client = TestClient(app, raise_server_exceptions=False)
    response = client.get("/explode")

    assert response.status_code == 500
    assert response.json()["message"] == "boom"
    assert response.json()["path"] == "/explode"


def test_unhandled_exception_response_carries_request_id():
    app = create_app("csv")

    @app.get("/explode")
    async def explode():
        raise RuntimeError("boom")

    client = TestClient(app, raise_server_exceptions=False)
    response = client.get("/explode", headers={"X-Request-ID": "req-500"})

    assert response.status_code == 500
    assert response.headers["X-Request-ID"] == "req-500"
    assert response.json()["status"] == 500
