"""Anchor phrase sets and their cached embeddings."""

from tonality.anchors.cache import AnchorEmbeddingCache, cache_key, partition_embeddings
from tonality.anchors.defaults import DEFAULT_ANCHORS
from tonality.anchors.loader import anchor_set_from_mapping, load_anchor_set

__all__ = [
    "AnchorEmbeddingCache",
    "DEFAULT_ANCHORS",
    "anchor_set_from_mapping",
    "cache_key",
    "load_anchor_set",
    "partition_embeddings",
]
