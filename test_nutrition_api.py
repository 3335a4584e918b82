"""
食物搜索接口验证脚本

运行方式：pytest test_nutrition_api.py
"""

from fastapi.testclient import TestClient

from salus.app import create_app
from salus.settings import BackendSettings
from salus_libs.fatsecret import NutritionAuthError, NutritionUpstreamError

SETTINGS = BackendSettings(host="127.0.0.1", port=8080, gemini_model_name="gemini-2.5-flash", gemini_rpm=1000)

UPSTREAM = {"foods": {"food": [{"food_id": "33691", "food_name": "Banana"}], "max_results": "20", "total_results": "1"}}


class NoGeneration:
    async def generate(self, prompt: str) -> str:
        raise AssertionError("generator must not be called")


class FakeSearch:
    def __init__(self, error: Exception = None):
        self.error = error
        self.calls = []

    async def search_foods(self, query, page_number=None, max_results=None):
        self.calls.append((query, page_number, max_results))
        if self.error is not None:
            raise self.error
        return UPSTREAM


def _client(search: FakeSearch) -> TestClient:
    return TestClient(create_app(settings=SETTINGS, generator=NoGeneration(), nutrition_client=search))


def test_search_passes_upstream_json_through():
    search = FakeSearch()
    response = _client(search).get("/search", params={"query": " banana ", "page_number": 1, "max_results": 10})

    assert response.status_code == 200
    assert response.json() == UPSTREAM
    assert search.calls == [("banana", 1, 10)]


def test_missing_or_blank_query_is_400():
    search = FakeSearch()
    client = _client(search)

    assert client.get("/search").status_code == 400
    assert client.get("/search", params={"query": "   "}).status_code == 400
    assert search.calls == []


def test_out_of_range_paging_is_400():
    search = FakeSearch()
    response = _client(search).get("/search", params={"query": "rice", "max_results": 500})

    assert response.status_code == 400
    assert search.calls == []


def test_auth_failure_is_500():
    response = _client(FakeSearch(NutritionAuthError("failed to get token: HTTP 401"))).get(
        "/search", params={"query": "rice"}
    )
    assert response.status_code == 500
    assert response.json()["detail"] == "Error searching foods: failed to get token: HTTP 401"


def test_upstream_failure_is_500():
    response = _client(FakeSearch(NutritionUpstreamError("API error: HTTP 503", status=503))).get(
        "/search", params={"query": "rice"}
    )
    assert response.status_code == 500
    assert response.json()["detail"].startswith("Error searching foods: API error")
