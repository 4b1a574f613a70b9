import json

import httpx
import pytest

from conftest import grounded_body, maps_chunk
from drishti.shared.infrastructure.llm.base import (
    AuthenticationError,
    MalformedResponseError,
    ModelNotFoundError,
    ProviderError,
    RateLimitError,
)
from drishti.shared.infrastructure.llm.gemini_provider import GeminiProvider


def make_provider(handler, **kwargs):
    kwargs.setdefault("api_key", "test-key")
    kwargs.setdefault("retry_delay", 0.0)
    return GeminiProvider(transport=httpx.MockTransport(handler), **kwargs)


async def test_request_carries_maps_tool_and_api_key():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["key"] = request.headers.get("x-goog-api-key")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=grounded_body(maps_chunk("Bridge X")))

    async with make_provider(handler) as provider:
        body = await provider.generate_grounded("find bridges", model="gemini-test")

    assert seen["url"] == "https://generativelanguage.googleapis.com/v1beta/models/gemini-test:generateContent"
    assert seen["key"] == "test-key"
    assert seen["body"]["tools"] == [{"googleMaps": {}}]
    assert seen["body"]["contents"][0]["parts"][0]["text"] == "find bridges"
    assert body["candidates"][0]["groundingMetadata"]["groundingChunks"][0]["maps"]["title"] == "Bridge X"


async def test_default_model_and_base_url_override():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        return httpx.Response(200, json={})

    async with make_provider(handler, base_url="http://proxy.local/v1beta/", default_model="m1") as provider:
        await provider.generate_grounded("x")

    assert seen["url"] == "http://proxy.local/v1beta/models/m1:generateContent"


async def test_no_key_header_without_api_key():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["key"] = request.headers.get("x-goog-api-key")
        return httpx.Response(200, json={})

    async with make_provider(handler, api_key=None) as provider:
        await provider.generate_grounded("x")

    assert seen["key"] is None


@pytest.mark.parametrize(
    "status, error",
    [
        (401, AuthenticationError),
        (403, AuthenticationError),
        (404, ModelNotFoundError),
        (400, ProviderError),
    ],
)
async def test_error_statuses_are_not_retried(status, error):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(status, json={"error": {"message": "nope"}})

    async with make_provider(handler) as provider:
        with pytest.raises(error) as exc_info:
            await provider.generate_grounded("x")

    assert exc_info.value.status_code == status
    assert len(calls) == 1


async def test_rate_limit_and_server_errors_are_retried_then_succeed():
    statuses = [429, 503]

    def handler(request: httpx.Request) -> httpx.Response:
        if statuses:
            return httpx.Response(statuses.pop(0))
        return httpx.Response(200, json={"candidates": []})

    async with make_provider(handler, max_retries=2) as provider:
        assert await provider.generate_grounded("x") == {"candidates": []}


async def test_retries_are_bounded():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(429)

    async with make_provider(handler, max_retries=1) as provider:
        with pytest.raises(RateLimitError):
            await provider.generate_grounded("x")

    assert len(calls) == 2


@pytest.mark.parametrize("content", [b"<html>oops</html>", b"[1, 2]"])
async def test_unusable_bodies_are_malformed(content):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=content)

    async with make_provider(handler) as provider:
        with pytest.raises(MalformedResponseError):
            await provider.generate_grounded("x")


async def test_transport_errors_become_provider_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with make_provider(handler, max_retries=0) as provider:
        with pytest.raises(ProviderError):
            await provider.generate_grounded("x")
