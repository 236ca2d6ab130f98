"""Tests for the JSONPlaceholder users proxy."""

import httpx
import pytest
from fastapi.testclient import TestClient

from app.controllers import thirdparty_controller
from app.core.exceptions import ThirdPartyError
from app.main import create_app
from app.sao.jsonplaceholder_sao import JsonPlaceholderSAO
from app.services.thirdparty_service import ThirdPartyService

USERS = [
    {
        "id": 1,
        "name": "Leanne Graham",
        "username": "Bret",
        "email": "Sincere@april.biz",
        "address": {"street": "Kulas Light", "geo": {"lat": "-37.3159", "lng": "81.1496"}},
        "company": {"name": "Romaguera-Crona"},
    }
]


def _sao(handler):
    return JsonPlaceholderSAO(base_url="https://users.test/", transport=httpx.MockTransport(handler))


class TestJsonPlaceholderSAO:

    async def test_get_users_returns_payload_unchanged(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json=USERS)

        users = await _sao(handler).get_users()

        assert users == USERS
        assert str(requests[0].url) == "https://users.test/users"

    async def test_non_2xx_raises(self):
        sao = _sao(lambda request: httpx.Response(503, text="down"))

        with pytest.raises(ThirdPartyError, match="Failed to fetch users. Status: 503"):
            await sao.get_users()

    async def test_invalid_json_raises(self):
        sao = _sao(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(ThirdPartyError, match="Failed to parse users response"):
            await sao.get_users()

    async def test_non_array_raises(self):
        sao = _sao(lambda request: httpx.Response(200, json={"users": []}))

        with pytest.raises(ThirdPartyError, match="Failed to parse users response"):
            await sao.get_users()


class TestThirdPartyEndpoint:

    def _client(self, handler):
        app = create_app("csv")
        service = ThirdPartyService(_sao(handler))
        app.dependency_overrides[thirdparty_controller.get_thirdparty_service] = lambda: service
        return TestClient(app)

    def test_proxies_users(self):
        client = self._client(lambda request: httpx.Response(200, json=USERS))

        response = client.get("/thirdparty/users")

        assert response.status_code == 200
        assert response.json() == USERS

    def test_upstream_failure_is_500_with_message(self):
        client = self._client(lambda request: httpx.Response(500))

        response = client.get("/thirdparty/users")

        assert response.status_code == 500
        assert response.json()["message"] == "Failed to fetch users. Status: 500"
        assert response.json()["path"] == "/thirdparty/users"
