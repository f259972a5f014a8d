"""Multi-scale ensemble sentiment classification against anchor embeddings.

The pipeline is a chain of pure functions:

1. ``similarity_triple`` aggregates query/anchor similarity per class at a
   given scale.
2. ``classify_with_adaptive_threshold`` turns one triple into a label and a
   per-scale confidence.
3. ``ensemble_results`` combines the per-scale results by confidence-weighted
   voting.

The numeric constants below are empirically chosen hyperparameters. They are
kept verbatim so outputs stay comparable across implementations.
"""

from __future__ import annotations

import logging
import math
import warnings
from typing import Sequence

from tonality.errors import DegenerateAnchorSetWarning, NotInitializedError
from tonality.similarity import similarity_triple
from tonality.types import (
    AnchorEmbeddings,
    ClassificationResult,
    ScaleResult,
    Sentiment,
    SENTIMENTS,
    SimilarityTriple,
    Vector,
)

logger = logging.getLogger(__name__)

SCALES: tuple[float, ...] = (0.5, 1.0, 2.0)

BASE_THRESHOLD = 0.02
THRESHOLD_SPREAD = 0.05
AMBIGUOUS_MIN_CONFIDENCE = 0.1
AMBIGUOUS_CONFIDENCE_FACTOR = 0.5
NEUTRAL_BOOST_RATIO = 1.1
NEUTRAL_BOOST_FACTOR = 1.2
NEUTRAL_BOOST_CAP = 0.9
WEAK_ADVANTAGE_MARGIN = 0.03
WEAK_ADVANTAGE_PENALTY = 0.8

SEPARATION_WEIGHT = 0.4
CONSISTENCY_WEIGHT = 0.3
ABSOLUTE_WEIGHT = 0.3
SEPARATION_SCALE = 5.0
CONSISTENCY_SCALE = 3.0

VOTE_SEPARATION_WEIGHT = 0.4
MEAN_CONFIDENCE_WEIGHT = 0.4
CONFIDENCE_CONSISTENCY_WEIGHT = 0.2


def _clamp01(value: float) -> float:
    return min(1.0, max(0.0, value))


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def _population_variance(values: Sequence[float]) -> float:
    mean = _mean(values)
    return sum((value - mean) ** 2 for value in values) / len(values)


def enhanced_confidence(similarities: SimilarityTriple) -> float:
    """Blend separation, spread and absolute strength of the scores into [0, 1]."""
    scores = similarities.scores()
    ranked = sorted(scores, reverse=True)
    separation = min(1.0, (ranked[0] - ranked[1]) * SEPARATION_SCALE)
    consistency = min(1.0, math.sqrt(_population_variance(scores)) * CONSISTENCY_SCALE)
    absolute = ranked[0]
    confidence = (
        separation * SEPARATION_WEIGHT
        + consistency * CONSISTENCY_WEIGHT
        + absolute * ABSOLUTE_WEIGHT
    )
    return _clamp01(confidence)


def classify_with_adaptive_threshold(similarities: SimilarityTriple) -> tuple[Sentiment, float]:
    """Classify one similarity triple.

    The required margin between the top two classes grows as the three scores
    bunch together. Ambiguous triples fall back to a low-confidence neutral.
    """
    scores = similarities.scores()
    # sorted() is stable, so equal scores keep positive/negative/neutral order.
    ranked = sorted(similarities, key=lambda item: item[1], reverse=True)
    winner, max_score = ranked[0]
    second_score = ranked[1][1]
    avg = _mean(scores)
    score_range = max(scores) - min(scores)
    threshold = BASE_THRESHOLD + THRESHOLD_SPREAD * (1 - score_range)

    if max_score - second_score < threshold:
        confidence = max(AMBIGUOUS_MIN_CONFIDENCE, avg * AMBIGUOUS_CONFIDENCE_FACTOR)
        return Sentiment.NEUTRAL, _clamp01(confidence)

    if winner is Sentiment.NEUTRAL and max_score > avg * NEUTRAL_BOOST_RATIO:
        confidence = min(NEUTRAL_BOOST_CAP, enhanced_confidence(similarities) * NEUTRAL_BOOST_FACTOR)
        return Sentiment.NEUTRAL, _clamp01(confidence)

    if winner is not Sentiment.NEUTRAL and max_score - similarities.neutral < WEAK_ADVANTAGE_MARGIN:
        return winner, enhanced_confidence(similarities) * WEAK_ADVANTAGE_PENALTY

    return winner, enhanced_confidence(similarities)


def analyze_scale(embedding: Vector, anchors: AnchorEmbeddings, scale: float) -> ScaleResult:
    similarities = similarity_triple(embedding, anchors, scale)
    label, confidence = classify_with_adaptive_threshold(similarities)
    return ScaleResult(scale=scale, label=label, confidence=confidence, similarities=similarities)


def ensemble_results(results: Sequence[ScaleResult]) -> ClassificationResult:
    """Combine per-scale results with confidence-weighted voting.

    Ties on the normalized vote go to the later label in positive, negative,
    neutral order, so neutral wins any tie it takes part in. With no vote
    weight at all the result is neutral with zero confidence.
    """
    votes = {sentiment: 0.0 for sentiment in SENTIMENTS}
    total_weight = 0.0
    for result in results:
        votes[result.label] += result.confidence
        total_weight += result.confidence

    if total_weight <= 0:
        return ClassificationResult(label=Sentiment.NEUTRAL, confidence=0.0, scales=tuple(results))

    for sentiment in SENTIMENTS:
        votes[sentiment] /= total_weight

    winner = SENTIMENTS[0]
    for sentiment in SENTIMENTS[1:]:
        if votes[sentiment] >= votes[winner]:
            winner = sentiment

    other_votes = [votes[sentiment] for sentiment in SENTIMENTS if sentiment is not winner]
    vote_separation = votes[winner] - _mean(other_votes)
    confidences = [result.confidence for result in results]
    consistency = 1 - math.sqrt(_population_variance(confidences))

    confidence = _clamp01(
        vote_separation * VOTE_SEPARATION_WEIGHT
        + _mean(confidences) * MEAN_CONFIDENCE_WEIGHT
        + consistency * CONFIDENCE_CONSISTENCY_WEIGHT
    )
    return ClassificationResult(label=winner, confidence=confidence, scales=tuple(results))


def classify(
    embedding: Vector,
    anchors: AnchorEmbeddings | None,
    *,
    scales: Sequence[float] = SCALES,
    check_anchors: bool = True,
) -> ClassificationResult:
    """Classify a query embedding against pre-embedded anchors.

    Raises ``NotInitializedError`` when ``anchors`` is missing or holds no
    vectors. With ``check_anchors`` a class without anchors is reported as a
    ``DegenerateAnchorSetWarning``; batch callers that already reported the
    anchor set pass ``False``. Pure and synchronous; safe to call from
    multiple threads.
    """
    if anchors is None or anchors.is_empty():
        raise NotInitializedError("Anchor embeddings not initialized. Fetch anchor embeddings first.")
    if check_anchors:
        empty = anchors.empty_classes()
        if empty:
            names = ", ".join(sentiment.value for sentiment in empty)
            logger.warning("Anchor set has no %s anchors; their similarity is fixed at 0.", names)
            warnings.warn(
                f"Anchor set has no anchors for: {names}",
                DegenerateAnchorSetWarning,
                stacklevel=2,
            )
    results = [analyze_scale(embedding, anchors, scale) for scale in scales]
    return ensemble_results(results)
