from __future__ import annotations

import base64
from array import array
import json
import math

import httpx
import pytest

from tonality.embeddings import create_embeddings_client
from tonality.embeddings.mock import MockEmbeddingsClient
from tonality.embeddings.remote import RemoteEmbeddingsClient
from tonality.errors import EmbeddingProviderError


def _remote(handler) -> RemoteEmbeddingsClient:
    return RemoteEmbeddingsClient(
        model="text-embedding-3-large",
        api_key="test-key",
        base_url="https://embeddings.example/v1",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_mock_embeddings_are_deterministic_unit_vectors() -> None:
    client = MockEmbeddingsClient(model="mock-embedding", dims=32)
    first = await client.embed(["Great value", "Awful"])
    second = await client.embed(["Great value", "Awful"])

    assert [item.embedding for item in first] == [item.embedding for item in second]
    for item in first:
        assert item.dims == 32
        assert math.sqrt(sum(value * value for value in item.embedding)) == pytest.approx(1.0)
    assert first[0].embedding != first[1].embedding
    assert client.calls == [["Great value", "Awful"], ["Great value", "Awful"]]


@pytest.mark.asyncio
async def test_remote_posts_batch_and_orders_by_index() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["auth"] = request.headers.get("authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "model": "text-embedding-3-large",
                "data": [
                    {"index": 1, "embedding": [0.0, 1.0]},
                    {"index": 0, "embedding": [1.0, 0.0]},
                ],
                "usage": {"prompt_tokens": 4},
            },
        )

    client = _remote(handler)
    try:
        results = await client.embed(["first", "second"])
    finally:
        await client.aclose()

    assert seen["path"] == "/v1/embeddings"
    assert seen["auth"] == "Bearer test-key"
    assert seen["body"] == {"model": "text-embedding-3-large", "input": ["first", "second"]}
    assert [result.text for result in results] == ["first", "second"]
    assert results[0].embedding == (1.0, 0.0)
    assert results[1].embedding == (0.0, 1.0)


@pytest.mark.asyncio
async def test_remote_decodes_base64_embeddings() -> None:
    encoded = base64.b64encode(array("f", [0.5, -0.25]).tobytes()).decode("ascii")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"data": [{"embedding": encoded}]})

    async with _remote(handler) as client:
        results = await client.embed(["only"])
    assert results[0].embedding == (0.5, -0.25)
    assert results[0].dims == 2


@pytest.mark.asyncio
async def test_remote_error_status_raises_provider_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": {"message": "Incorrect API key provided"}})

    async with _remote(handler) as client:
        with pytest.raises(EmbeddingProviderError) as excinfo:
            await client.embed(["text"])
    assert excinfo.value.status_code == 401
    assert excinfo.value.message == "Incorrect API key provided"


@pytest.mark.asyncio
async def test_remote_missing_entries_raise() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"data": [{"index": 0, "embedding": [1.0]}]})

    async with _remote(handler) as client:
        with pytest.raises(EmbeddingProviderError, match="missing entries"):
            await client.embed(["a", "b"])


@pytest.mark.parametrize(
    ("body", "message"),
    [
        ({"text": "<html>gateway</html>"}, "not valid JSON"),
        ({"json": [[1.0, 0.0]]}, "must be a JSON object"),
        ({"json": {"data": {"embedding": [1.0]}}}, "must be a list"),
        ({"json": {"data": ["oops"]}}, "entries must be objects"),
        ({"json": {"data": [{"index": "0", "embedding": [1.0]}]}}, "non-integer index"),
        ({"json": {"data": [{"index": 0, "embedding": ["x"]}]}}, "Malformed embedding"),
    ],
)
@pytest.mark.asyncio
async def test_remote_malformed_success_body_raises_provider_error(body: dict, message: str) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, **body)

    async with _remote(handler) as client:
        with pytest.raises(EmbeddingProviderError, match=message) as excinfo:
            await client.embed(["only"])
    assert excinfo.value.status_code == 200


@pytest.mark.asyncio
async def test_remote_transport_failure_raises_provider_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with _remote(handler) as client:
        with pytest.raises(EmbeddingProviderError, match="ConnectError"):
            await client.embed(["a"])


@pytest.mark.asyncio
async def test_remote_empty_batch_skips_request() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    async with _remote(handler) as client:
        assert await client.embed([]) == []


def test_remote_requires_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(ValueError, match="OPENAI_API_KEY"):
        RemoteEmbeddingsClient.for_provider("openai", model="text-embedding-3-large")


def test_factory_modes() -> None:
    assert isinstance(create_embeddings_client("mock", "mock-embedding"), MockEmbeddingsClient)
    with pytest.raises(ValueError):
        create_embeddings_client("bogus", "model")
