from __future__ import annotations

from typing import Sequence

from tonality.embeddings.types import EmbeddingResult
from tonality.errors import EmbeddingProviderError


class ToyEmbeddingsClient:
    """Looks texts up in a fixed table; unknown texts get ``default``."""

    def __init__(
        self,
        table: dict[str, Sequence[float]],
        *,
        default: Sequence[float] | None = None,
        fail_with: str | None = None,
    ) -> None:
        self.table = table
        self.default = default
        self.fail_with = fail_with
        self.calls: list[list[str]] = []
        self.closed = False

    async def embed(self, texts: list[str]) -> list[EmbeddingResult]:
        self.calls.append(list(texts))
        if self.fail_with is not None:
            raise EmbeddingProviderError(self.fail_with, status_code=500)
        results = []
        for text in texts:
            vector = self.table.get(text, self.default)
            if vector is None:
                raise KeyError(text)
            results.append(EmbeddingResult(text=text, embedding=tuple(vector), model="toy", dims=len(vector)))
        return results

    async def aclose(self) -> None:
        self.closed = True
