"""Value types shared by the anchor cache, classifier and service."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Sequence

Vector = Sequence[float]


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"

    def __str__(self) -> str:
        return self.value


# Iteration order matters for ranking and vote tie-breaks.
SENTIMENTS: tuple[Sentiment, ...] = (Sentiment.POSITIVE, Sentiment.NEGATIVE, Sentiment.NEUTRAL)


@dataclass(frozen=True)
class AnchorSet:
    positive: tuple[str, ...] = ()
    negative: tuple[str, ...] = ()
    neutral: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Accept lists from callers but store tuples so the set stays hashable.
        for name in ("positive", "negative", "neutral"):
            object.__setattr__(self, name, tuple(getattr(self, name)))

    def phrases(self, sentiment: Sentiment) -> tuple[str, ...]:
        return getattr(self, sentiment.value)

    def counts(self) -> tuple[int, int, int]:
        return len(self.positive), len(self.negative), len(self.neutral)

    def flatten(self) -> list[str]:
        return [*self.positive, *self.negative, *self.neutral]

    def to_dict(self) -> dict:
        return {
            "positive": list(self.positive),
            "negative": list(self.negative),
            "neutral": list(self.neutral),
        }


@dataclass(frozen=True)
class AnchorEmbeddings:
    positive: tuple[tuple[float, ...], ...] = ()
    negative: tuple[tuple[float, ...], ...] = ()
    neutral: tuple[tuple[float, ...], ...] = ()

    def __post_init__(self) -> None:
        for name in ("positive", "negative", "neutral"):
            vectors = tuple(tuple(float(value) for value in vec) for vec in getattr(self, name))
            object.__setattr__(self, name, vectors)

    def vectors(self, sentiment: Sentiment) -> tuple[tuple[float, ...], ...]:
        return getattr(self, sentiment.value)

    def counts(self) -> tuple[int, int, int]:
        return len(self.positive), len(self.negative), len(self.neutral)

    def is_empty(self) -> bool:
        return not (self.positive or self.negative or self.neutral)

    def empty_classes(self) -> list[Sentiment]:
        return [sentiment for sentiment in SENTIMENTS if not self.vectors(sentiment)]


@dataclass(frozen=True)
class SimilarityTriple:
    positive: float
    negative: float
    neutral: float

    def __getitem__(self, sentiment: Sentiment) -> float:
        return getattr(self, Sentiment(sentiment).value)

    def __iter__(self) -> Iterator[tuple[Sentiment, float]]:
        for sentiment in SENTIMENTS:
            yield sentiment, self[sentiment]

    def scores(self) -> list[float]:
        return [self.positive, self.negative, self.neutral]

    def to_dict(self) -> dict:
        return {
            "positive": self.positive,
            "negative": self.negative,
            "neutral": self.neutral,
        }


@dataclass(frozen=True)
class ScaleResult:
    scale: float
    label: Sentiment
    confidence: float
    similarities: SimilarityTriple

    def to_dict(self) -> dict:
        return {
            "scale": self.scale,
            "label": self.label.value,
            "confidence": self.confidence,
            "similarities": self.similarities.to_dict(),
        }


@dataclass(frozen=True)
class ClassificationResult:
    label: Sentiment
    confidence: float
    scales: tuple[ScaleResult, ...] = field(default=(), compare=False)

    def to_dict(self) -> dict:
        return {
            "label": self.label.value,
            "confidence": self.confidence,
            "scales": [scale.to_dict() for scale in self.scales],
        }


@dataclass(frozen=True)
class ReviewResult:
    index: int
    text: str
    result: ClassificationResult

    @property
    def label(self) -> Sentiment:
        return self.result.label

    @property
    def confidence(self) -> float:
        return self.result.confidence

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "text": self.text,
            "sentiment": self.result.label.value,
            "confidence": self.result.confidence,
        }


@dataclass(frozen=True)
class SentimentSummary:
    total: int
    counts: dict[Sentiment, int]
    percentages: dict[Sentiment, int]
    overall_rating: str
    average_confidence: float

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "counts": {key.value: value for key, value in self.counts.items()},
            "percentages": {key.value: value for key, value in self.percentages.items()},
            "overall_rating": self.overall_rating,
            "average_confidence": self.average_confidence,
        }
