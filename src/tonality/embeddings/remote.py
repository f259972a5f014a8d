"""HTTP embeddings client for OpenAI-compatible ``/embeddings`` endpoints."""

from __future__ import annotations

import base64
from array import array
import logging
import os
import time
from typing import Any

import httpx

from tonality.embeddings.types import EmbeddingResult
from tonality.errors import EmbeddingProviderError

logger = logging.getLogger(__name__)

PROVIDERS: dict[str, dict[str, str]] = {
    "openai": {
        "api_key_env": "OPENAI_API_KEY",
        "base_url_env": "OPENAI_BASE_URL",
        "base_url": "https://api.openai.com/v1",
    },
    "openrouter": {
        "api_key_env": "OPENROUTER_API_KEY",
        "base_url_env": "OPENROUTER_BASE_URL",
        "base_url": "https://openrouter.ai/api/v1",
    },
}


class RemoteEmbeddingsClient:
    def __init__(
        self,
        *,
        model: str,
        api_key: str,
        base_url: str,
        timeout_s: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("An API key is required for remote embeddings.")
        self._model = model
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(base_url=self._base_url, timeout=timeout_s, transport=transport)

    @classmethod
    def for_provider(
        cls,
        provider: str,
        *,
        model: str,
        base_url: str | None = None,
        timeout_s: float = 60.0,
    ) -> "RemoteEmbeddingsClient":
        settings = PROVIDERS[provider]
        api_key = os.getenv(settings["api_key_env"])
        if not api_key:
            raise ValueError(f"{settings['api_key_env']} is required for {provider} embeddings.")
        resolved_url = base_url or os.getenv(settings["base_url_env"], settings["base_url"])
        return cls(model=model, api_key=api_key, base_url=resolved_url, timeout_s=timeout_s)

    async def embed(self, texts: list[str]) -> list[EmbeddingResult]:
        if not texts:
            return []
        body = {
            "model": self._model,
            "input": texts,
        }
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        start = time.perf_counter()
        try:
            response = await self._client.post("/embeddings", json=body, headers=headers)
        except httpx.HTTPError as exc:
            raise EmbeddingProviderError(f"{type(exc).__name__}: {exc}") from exc
        latency_ms = int((time.perf_counter() - start) * 1000)
        logger.debug("Embedded %d texts with %s in %d ms", len(texts), self._model, latency_ms)

        status = response.status_code
        if status < 200 or status >= 300:
            raise EmbeddingProviderError(_error_message(response), status_code=status)

        try:
            payload = response.json()
        except ValueError as exc:
            raise EmbeddingProviderError("Embeddings response is not valid JSON.", status_code=status) from exc
        if not isinstance(payload, dict):
            raise EmbeddingProviderError("Embeddings response must be a JSON object.", status_code=status)
        data = payload.get("data") or []
        if not isinstance(data, list):
            raise EmbeddingProviderError("Embeddings response 'data' must be a list.", status_code=status)
        results: list[EmbeddingResult | None] = [None] * len(texts)
        for fallback_index, item in enumerate(data):
            if not isinstance(item, dict):
                raise EmbeddingProviderError("Embeddings response entries must be objects.", status_code=status)
            index = item.get("index")
            if index is None:
                index = fallback_index
            if isinstance(index, bool) or not isinstance(index, int):
                raise EmbeddingProviderError(
                    f"Embeddings response has non-integer index {index!r}.", status_code=status
                )
            if not 0 <= index < len(texts):
                raise EmbeddingProviderError(
                    f"Embeddings response has out-of-range index {index}.", status_code=status
                )
            try:
                embedding = _decode_embedding(item.get("embedding"))
            except (TypeError, ValueError) as exc:
                raise EmbeddingProviderError(f"Malformed embedding at index {index}.", status_code=status) from exc
            results[index] = EmbeddingResult(
                text=texts[index],
                embedding=embedding,
                model=payload.get("model", self._model),
                dims=len(embedding),
                raw={"latency_ms": latency_ms, "usage": payload.get("usage")},
            )
        if any(result is None for result in results):
            raise EmbeddingProviderError("Embeddings response missing entries.", status_code=status)
        return [result for result in results if result is not None]

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "RemoteEmbeddingsClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if isinstance(error, str):
        return error
    return response.text or response.reason_phrase


def _decode_embedding(raw: Any) -> tuple[float, ...]:
    if isinstance(raw, list):
        return tuple(float(value) for value in raw)
    if isinstance(raw, str):
        arr = array("f")
        arr.frombytes(base64.b64decode(raw))
        return tuple(arr)
    raise EmbeddingProviderError("Unsupported embedding format in response.")
