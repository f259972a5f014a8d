"""Cosine similarity and scale-weighted aggregation against anchor lists."""

from __future__ import annotations

import math
from typing import Sequence

from tonality.types import AnchorEmbeddings, SENTIMENTS, SimilarityTriple, Vector


def _norm(vec: Vector) -> float:
    return math.sqrt(sum(value * value for value in vec))


def cosine_similarity(a: Vector, b: Vector) -> float:
    """Cosine of the angle between ``a`` and ``b``.

    A zero vector on either side has no direction; it is reported as 0.0
    rather than NaN so downstream threshold arithmetic stays defined.
    """
    if len(a) != len(b):
        raise ValueError(f"Vector length mismatch: {len(a)} != {len(b)}")
    norm_a = _norm(a)
    norm_b = _norm(b)
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    dot = sum(x * y for x, y in zip(a, b))
    return dot / (norm_a * norm_b)


def scaled_similarity(embedding: Vector, anchors: Sequence[Vector], scale: float) -> float:
    """Weighted mean of similarities, weighting each by ``max(0, sim) ** (2 * scale)``.

    Larger scales let the closest anchors dominate. Returns 0.0 when no anchor
    has positive similarity, including when ``anchors`` is empty.
    """
    similarities = [cosine_similarity(embedding, anchor) for anchor in anchors]
    weights = [max(0.0, sim) ** (scale * 2) for sim in similarities]
    total_weight = sum(weights)
    if total_weight <= 0:
        return 0.0
    weighted_sum = sum(sim * weight for sim, weight in zip(similarities, weights))
    return weighted_sum / total_weight


def similarity_triple(embedding: Vector, anchors: AnchorEmbeddings, scale: float) -> SimilarityTriple:
    values = {
        sentiment.value: scaled_similarity(embedding, anchors.vectors(sentiment), scale)
        for sentiment in SENTIMENTS
    }
    return SimilarityTriple(**values)
