"""Batch sentiment analysis over an embeddings client."""

from __future__ import annotations

import logging
import math
from typing import Sequence

from tonality.anchors import DEFAULT_ANCHORS, AnchorEmbeddingCache
from tonality.classifier import classify
from tonality.embeddings import EmbeddingsClient
from tonality.errors import EmbeddingProviderError
from tonality.types import (
    AnchorEmbeddings,
    AnchorSet,
    ClassificationResult,
    ReviewResult,
    Sentiment,
    SENTIMENTS,
    SentimentSummary,
    Vector,
)

logger = logging.getLogger(__name__)


def parse_reviews(text: str) -> list[str]:
    """One review per line; blank lines are dropped."""
    return [line.strip() for line in text.splitlines() if line.strip()]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def overall_rating(percentages: dict[Sentiment, int]) -> str:
    if percentages[Sentiment.POSITIVE] > 60:
        return "Excellent"
    if percentages[Sentiment.POSITIVE] > 40:
        return "Good"
    if percentages[Sentiment.NEGATIVE] > 40:
        return "Poor"
    return "Mixed"


def summarize(results: Sequence[ReviewResult]) -> SentimentSummary:
    counts = {sentiment: 0 for sentiment in SENTIMENTS}
    for review in results:
        counts[review.label] += 1
    total = len(results)
    if total == 0:
        percentages = {sentiment: 0 for sentiment in SENTIMENTS}
        average_confidence = 0.0
    else:
        percentages = {sentiment: _round_half_up(counts[sentiment] / total * 100) for sentiment in SENTIMENTS}
        average_confidence = sum(review.confidence for review in results) / total
    return SentimentSummary(
        total=total,
        counts=counts,
        percentages=percentages,
        overall_rating=overall_rating(percentages),
        average_confidence=average_confidence,
    )


class SentimentService:
    """Fetch anchor and query embeddings, then classify each query.

    Anchor embeddings are memoized per anchor set for the lifetime of the
    service's cache, so repeated batches against the same anchors only embed
    the queries. A degenerate anchor set is reported once, when it is first
    embedded, not once per query.
    """

    def __init__(self, client: EmbeddingsClient, cache: AnchorEmbeddingCache | None = None) -> None:
        self._client = client
        self._cache = cache if cache is not None else AnchorEmbeddingCache(self.embed_texts)

    @property
    def cache(self) -> AnchorEmbeddingCache:
        return self._cache

    async def embed_texts(self, texts: list[str]) -> list[tuple[float, ...]]:
        results = await self._client.embed(list(texts))
        if len(results) != len(texts):
            raise EmbeddingProviderError(
                f"Embedding provider returned {len(results)} vectors for {len(texts)} texts."
            )
        return [tuple(result.embedding) for result in results]

    async def get_anchor_embeddings(self, anchor_set: AnchorSet = DEFAULT_ANCHORS) -> AnchorEmbeddings:
        return await self._cache.get_anchor_embeddings(anchor_set)

    def classify(self, embedding: Vector, anchors: AnchorEmbeddings) -> ClassificationResult:
        return classify(embedding, anchors)

    async def classify_all(
        self,
        texts: Sequence[str],
        anchor_set: AnchorSet | None = None,
    ) -> list[ReviewResult]:
        anchors = await self.get_anchor_embeddings(anchor_set or DEFAULT_ANCHORS)
        if not texts:
            return []
        embeddings = await self.embed_texts(list(texts))
        logger.debug("Classifying %d texts", len(texts))
        return [
            ReviewResult(index=index, text=text, result=classify(embedding, anchors, check_anchors=False))
            for index, (text, embedding) in enumerate(zip(texts, embeddings))
        ]

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "SentimentService":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
