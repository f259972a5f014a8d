from __future__ import annotations

import math

import pytest

from tonality.similarity import cosine_similarity, scaled_similarity, similarity_triple
from tonality.types import AnchorEmbeddings


def test_self_similarity_is_one() -> None:
    vec = [0.3, -1.2, 4.0, 0.01]
    assert cosine_similarity(vec, vec) == pytest.approx(1.0)


def test_cosine_ignores_magnitude() -> None:
    assert cosine_similarity([1.0, 1.0], [5.0, 5.0]) == pytest.approx(1.0)
    assert cosine_similarity([1.0, 0.0], [0.0, 3.0]) == pytest.approx(0.0)
    assert cosine_similarity([1.0, 0.0], [-2.0, 0.0]) == pytest.approx(-1.0)


def test_zero_vector_has_zero_similarity() -> None:
    value = cosine_similarity([0.0, 0.0, 0.0], [1.0, 2.0, 3.0])
    assert value == 0.0
    assert not math.isnan(value)


def test_length_mismatch_raises() -> None:
    with pytest.raises(ValueError):
        cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0])


def test_scaled_similarity_empty_or_negative_is_zero() -> None:
    assert scaled_similarity([1.0, 0.0], [], 1.0) == 0.0
    assert scaled_similarity([1.0, 0.0], [[-1.0, 0.0], [-1.0, -1.0]], 2.0) == 0.0


def test_scaled_similarity_single_anchor_returns_its_similarity() -> None:
    expected = cosine_similarity([0.9, 0.1], [1.0, 0.0])
    for scale in (0.5, 1.0, 2.0):
        assert scaled_similarity([0.9, 0.1], [[1.0, 0.0]], scale) == pytest.approx(expected)


def test_larger_scale_emphasizes_strong_matches() -> None:
    query = [1.0, 0.0]
    anchors = [[1.0, 0.0], [0.6, 0.8]]
    low = scaled_similarity(query, anchors, 0.5)
    mid = scaled_similarity(query, anchors, 1.0)
    high = scaled_similarity(query, anchors, 2.0)
    # weights are sim ** 1 at scale 0.5: (1 + 0.36) / 1.6
    assert low == pytest.approx(0.85)
    assert mid == pytest.approx(1.216 / 1.36)
    assert low < mid < high < 1.0


def test_negative_anchor_does_not_pull_aggregate() -> None:
    # The -1 anchor gets zero weight, so only the matching anchor counts.
    assert scaled_similarity([1.0, 0.0], [[1.0, 0.0], [-1.0, 0.0]], 1.0) == pytest.approx(1.0)


def test_similarity_triple_per_class() -> None:
    anchors = AnchorEmbeddings(positive=[[1.0, 0.0]], negative=[[-1.0, 0.0]], neutral=[[0.0, 1.0]])
    triple = similarity_triple([0.0, 1.0], anchors, 1.0)
    assert triple.positive == pytest.approx(0.0)
    assert triple.negative == pytest.approx(0.0)
    assert triple.neutral == pytest.approx(1.0)
