"""
FatSecret 客户端验证脚本

用本地 aiohttp 测试服务器模拟 token 与 foods.search 接口
运行方式：pytest test_fatsecret_client.py
"""

import asyncio

import pytest
from aiohttp import web
from aiohttp import test_utils

from salus_libs.fatsecret import (
    FatSecretClient,
    FatSecretConfig,
    NutritionAuthError,
    NutritionUpstreamError,
)


class FakeFatSecret:
    """In-process stand-in for the token endpoint and the REST server API."""

    def __init__(self, token_status: int = 200, reject_first_search: bool = False, search_status: int = 200):
        self.token_status = token_status
        self.reject_first_search = reject_first_search
        self.search_status = search_status
        self.token_requests = []
        self.search_requests = []

    def app(self) -> web.Application:
        app = web.Application()
        app.router.add_post("/connect/token", self.token)
        app.router.add_get("/rest/server.api", self.search)
        return app

    async def token(self, request: web.Request) -> web.Response:
        form = await request.post()
        self.token_requests.append({"auth": request.headers.get("Authorization", ""), **dict(form)})
        if self.token_status != 200:
            return web.json_response({"error": "invalid_client"}, status=self.token_status)
        n = len(self.token_requests)
        return web.json_response(
            {"access_token": f"tok-{n}", "token_type": "Bearer", "expires_in": 86400, "scope": "basic"}
        )

    async def search(self, request: web.Request) -> web.Response:
        self.search_requests.append(
            {"auth": request.headers.get("Authorization", ""), **dict(request.query)}
        )
        if self.reject_first_search and len(self.search_requests) == 1:
            return web.json_response({"error": "expired"}, status=401)
        if self.search_status != 200:
            return web.json_response({"error": "boom"}, status=self.search_status)
        return web.json_response(
            {"foods": {"food": [{"food_name": request.query["search_expression"]}], "total_results": "1"}}
        )


def _run_against(fake: FakeFatSecret, scenario, client_id="id", client_secret="secret"):
    async def runner():
        server = test_utils.TestServer(fake.app())
        await server.start_server()
        try:
            config = FatSecretConfig(
                client_id=client_id,
                client_secret=client_secret,
                base_url=str(server.make_url("/rest/server.api")),
                token_url=str(server.make_url("/connect/token")),
            )
            return await scenario(FatSecretClient(config))
        finally:
            await server.close()

    return asyncio.run(runner())


def test_search_returns_upstream_json_and_reuses_token():
    fake = FakeFatSecret()

    async def scenario(client):
        first = await client.search_foods("banana", page_number=0, max_results=5)
        second = await client.search_foods("apple")
        return first, second

    first, second = _run_against(fake, scenario)

    assert first["foods"]["food"][0]["food_name"] == "banana"
    assert second["foods"]["food"][0]["food_name"] == "apple"
    assert len(fake.token_requests) == 1
    assert fake.token_requests[0]["grant_type"] == "client_credentials"
    assert fake.token_requests[0]["scope"] == "basic"
    assert fake.token_requests[0]["auth"].startswith("Basic ")

    query = fake.search_requests[0]
    assert query["method"] == "foods.search"
    assert query["format"] == "json"
    assert query["page_number"] == "0"
    assert query["max_results"] == "5"
    assert query["auth"] == "Bearer tok-1"
    assert "page_number" not in fake.search_requests[1]


def test_rejected_token_is_refreshed_once():
    fake = FakeFatSecret(reject_first_search=True)

    async def scenario(client):
        return await client.search_foods("rice")

    result = _run_against(fake, scenario)

    assert result["foods"]["food"][0]["food_name"] == "rice"
    assert len(fake.token_requests) == 2
    assert [r["auth"] for r in fake.search_requests] == ["Bearer tok-1", "Bearer tok-2"]


def test_token_endpoint_failure_is_auth_error():
    fake = FakeFatSecret(token_status=401)

    async def scenario(client):
        with pytest.raises(NutritionAuthError):
            await client.search_foods("rice")

    _run_against(fake, scenario)
    assert fake.search_requests == []


def test_search_failure_is_upstream_error():
    fake = FakeFatSecret(search_status=503)

    async def scenario(client):
        with pytest.raises(NutritionUpstreamError) as exc_info:
            await client.search_foods("rice")
        return exc_info.value.status

    assert _run_against(fake, scenario) == 503


def test_missing_credentials_never_reach_the_network():
    fake = FakeFatSecret()

    async def scenario(client):
        with pytest.raises(NutritionAuthError):
            await client.search_foods("rice")

    _run_against(fake, scenario, client_id="", client_secret="")
    assert fake.token_requests == []
