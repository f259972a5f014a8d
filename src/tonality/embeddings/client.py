"""Embedding client interface and factory."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from tonality.embeddings.types import EmbeddingResult

EMBEDDING_MODES = ("mock", "openai", "openrouter")


@runtime_checkable
class EmbeddingsClient(Protocol):
    async def embed(self, texts: list[str]) -> list[EmbeddingResult]:
        """Embed a batch of texts, preserving order."""

    async def aclose(self) -> None:
        """Release any underlying client resources."""


def create_embeddings_client(
    mode: str,
    model: str,
    *,
    base_url: str | None = None,
    timeout_s: float = 60.0,
) -> EmbeddingsClient:
    if mode == "mock":
        from tonality.embeddings.mock import MockEmbeddingsClient

        return MockEmbeddingsClient(model=model)
    if mode in {"openai", "openrouter"}:
        from tonality.embeddings.remote import RemoteEmbeddingsClient

        return RemoteEmbeddingsClient.for_provider(mode, model=model, base_url=base_url, timeout_s=timeout_s)
    raise ValueError(f"Unsupported embeddings mode: {mode}")
