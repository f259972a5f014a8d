"""Anchor-based multi-scale ensemble sentiment classification."""

from tonality.anchors import DEFAULT_ANCHORS, AnchorEmbeddingCache
from tonality.classifier import SCALES, classify
from tonality.errors import (
    AnchorSetError,
    DegenerateAnchorSetWarning,
    EmbeddingProviderError,
    NotInitializedError,
    TonalityError,
)
from tonality.service import SentimentService, summarize
from tonality.types import (
    AnchorEmbeddings,
    AnchorSet,
    ClassificationResult,
    ReviewResult,
    ScaleResult,
    Sentiment,
    SentimentSummary,
    SimilarityTriple,
)

__all__ = [
    "AnchorEmbeddingCache",
    "AnchorEmbeddings",
    "AnchorSet",
    "AnchorSetError",
    "ClassificationResult",
    "DEFAULT_ANCHORS",
    "DegenerateAnchorSetWarning",
    "EmbeddingProviderError",
    "NotInitializedError",
    "ReviewResult",
    "SCALES",
    "ScaleResult",
    "Sentiment",
    "SentimentService",
    "SentimentSummary",
    "SimilarityTriple",
    "TonalityError",
    "classify",
    "summarize",
]
