import json

import httpx
import pytest

from seatable_nodes.infrastructure.external.seatable.http_executor import HttpxRequestExecutor


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_sends_headers_params_and_json():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"success": True})

    async with _client(handler) as client:
        result = await HttpxRequestExecutor(client).request(
            "PUT",
            "https://cloud.seatable.io/rows/",
            headers={"Authorization": "Token abc"},
            params={"table_name": "Contacts"},
            json={"row_id": "r1"},
        )

    assert result == {"success": True}
    assert seen == {
        "method": "PUT",
        "url": "https://cloud.seatable.io/rows/?table_name=Contacts",
        "auth": "Token abc",
        "body": {"row_id": "r1"},
    }


@pytest.mark.asyncio
async def test_empty_body_returns_empty_dict():
    async with _client(lambda request: httpx.Response(200)) as client:
        result = await HttpxRequestExecutor(client).request("DELETE", "https://cloud.seatable.io/x")
    assert result == {}


@pytest.mark.asyncio
async def test_error_status_raises():
    async with _client(lambda request: httpx.Response(403, text="forbidden")) as client:
        with pytest.raises(httpx.HTTPStatusError) as exc_info:
            await HttpxRequestExecutor(client).request("GET", "https://cloud.seatable.io/x")
    assert exc_info.value.response.status_code == 403


@pytest.mark.asyncio
async def test_invalid_json_raises_value_error():
    async with _client(lambda request: httpx.Response(200, text="<html>")) as client:
        with pytest.raises(ValueError):
            await HttpxRequestExecutor(client).request("GET", "https://cloud.seatable.io/x")


def test_default_timeout_from_settings():
    from seatable_nodes.core.config import settings

    assert HttpxRequestExecutor()._timeout_s == settings.HTTP_TIMEOUT_S
    assert HttpxRequestExecutor(timeout_s=5)._timeout_s == 5
