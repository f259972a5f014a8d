"""Offline embeddings client.

Vectors are pseudo-random but seeded from the text, so the same text always
maps to the same unit vector. A small lexicon nudges obviously positive or
negative words along two reserved axes, which keeps offline classification
runs loosely meaningful without a network provider.
"""

from __future__ import annotations

import hashlib
import math
import random
import re

from tonality.embeddings.types import EmbeddingResult

_POSITIVE_WORDS = frozenset(
    {
        "amazing", "best", "brilliant", "excellent", "exceptional", "fantastic", "great",
        "happy", "impressed", "incredible", "love", "outstanding", "perfect", "recommend",
    }
)
_NEGATIVE_WORDS = frozenset(
    {
        "awful", "broke", "cheap", "defective", "disappointed", "garbage", "horrible",
        "junk", "poor", "regret", "terrible", "useless", "waste", "worst",
    }
)
_NEUTRAL_WORDS = frozenset(
    {"acceptable", "adequate", "average", "basic", "decent", "expected", "fine", "okay", "standard"}
)
_TOKEN_RE = re.compile(r"[a-z']+")


class MockEmbeddingsClient:
    def __init__(self, model: str, dims: int = 256, lexicon_weight: float = 2.0, noise: float = 0.05) -> None:
        if dims < 4:
            raise ValueError("Mock embeddings need at least 4 dimensions.")
        self._model = model
        self._dims = dims
        self._lexicon_weight = lexicon_weight
        self._noise = noise
        self.calls: list[list[str]] = []

    async def embed(self, texts: list[str]) -> list[EmbeddingResult]:
        self.calls.append(list(texts))
        return [
            EmbeddingResult(
                text=text,
                embedding=self._vector(text),
                model=self._model,
                dims=self._dims,
                raw={"mock": True},
            )
            for text in texts
        ]

    def _vector(self, text: str) -> tuple[float, ...]:
        seed = int(hashlib.sha256((self._model + "|" + text).encode("utf-8")).hexdigest(), 16) % (2**32)
        rng = random.Random(seed)
        vec = [rng.gauss(0, 1) * self._noise for _ in range(self._dims)]
        tokens = _TOKEN_RE.findall(text.lower())
        for token in tokens:
            if token in _POSITIVE_WORDS:
                vec[0] += self._lexicon_weight
            elif token in _NEGATIVE_WORDS:
                vec[1] += self._lexicon_weight
            elif token in _NEUTRAL_WORDS:
                vec[2] += self._lexicon_weight
        norm = math.sqrt(sum(value * value for value in vec)) or 1.0
        return tuple(value / norm for value in vec)

    async def aclose(self) -> None:
        return None
