"""Tests for HTTP-based adapters."""

import asyncio

import httpx
import pytest

from ninja_training.adapters.openai_vision_client import OpenAIVisionClient
from ninja_training.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient


class _FakeCompletions:
    def __init__(self, content: str | None) -> None:
        self.content = content
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        message = type("Message", (), {"content": self.content})()
        choice = type("Choice", (), {"message": message})()
        return type("Resp", (), {"choices": [choice]})()


class _FakeOpenAI:
    def __init__(self, content: str | None = '{"description": "Toast"}') -> None:
        self.chat = type("Chat", (), {"completions": _FakeCompletions(content)})()


def test_openai_vision_client_returns_message_content() -> None:
    fake = _FakeOpenAI()
    client = OpenAIVisionClient(client=fake)

    result = asyncio.run(
        client.complete(
            model="gpt-4o",
            system_prompt="You are a nutritionist",
            user_prompt="Analyze",
            image_data_url="data:image/jpeg;base64,ZmFrZQ==",
            max_tokens=500,
            temperature=0.3,
        )
    )

    assert result == '{"description": "Toast"}'
    payload = fake.chat.completions.last_payload
    assert payload is not None
    assert payload["model"] == "gpt-4o"
    assert payload["max_tokens"] == 500
    messages = payload["messages"]
    assert messages[0] == {"role": "system", "content": "You are a nutritionist"}
    assert messages[1]["content"][1]["image_url"]["url"].startswith("data:image/jpeg")


def test_openfoodfacts_search_sends_query() -> None:
    seen: dict[str, str] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["search_terms"] = request.url.params["search_terms"]
        seen["page_size"] = request.url.params["page_size"]
        return httpx.Response(200, json={"products": [{"product_name": "Oats"}]})

    client = HttpxOpenFoodFactsClient(
        base_url="https://off.test",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    payload = asyncio.run(client.search_products("rolled oats", page_size=5))

    assert payload == {"products": [{"product_name": "Oats"}]}
    assert seen == {
        "path": "/cgi/search.pl",
        "search_terms": "rolled oats",
        "page_size": "5",
    }


def test_openfoodfacts_product_lookup() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/v0/product/123.json":
            return httpx.Response(200, json={"status": 1, "product": {"code": "123"}})
        return httpx.Response(404)

    client = HttpxOpenFoodFactsClient(
        base_url="https://off.test",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    assert asyncio.run(client.get_product("123"))["status"] == 1
    assert asyncio.run(client.get_product("999")) == {"status": 0}


def test_openfoodfacts_server_error_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    client = HttpxOpenFoodFactsClient(
        base_url="https://off.test",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.search_products("oats"))


def test_openfoodfacts_create_sets_user_agent() -> None:
    client = HttpxOpenFoodFactsClient.create(
        base_url="https://off.test/", user_agent="NinjaTraining/test"
    )

    assert client.base_url == "https://off.test"
    assert client.http_client.headers["User-Agent"] == "NinjaTraining/test"
    asyncio.run(client.close())
