"""Content-keyed memoization of anchor embeddings."""

from __future__ import annotations

import asyncio
import hashlib
import logging
import warnings
from typing import Awaitable, Callable, Sequence

from tonality.errors import DegenerateAnchorSetWarning, EmbeddingProviderError
from tonality.types import AnchorEmbeddings, AnchorSet, SENTIMENTS, Vector

logger = logging.getLogger(__name__)

EmbedFn = Callable[[list[str]], Awaitable[Sequence[Vector]]]

# Unit separator; not expected inside natural-language anchor phrases.
_SEPARATOR = "\x1f"


def cache_key(anchors: AnchorSet) -> str:
    """Hash of the category-ordered, list-ordered phrases.

    Per-category counts are part of the key, so moving a phrase from one
    category to a neighbouring one produces a different key.
    """
    counts = ",".join(str(count) for count in anchors.counts())
    combined = _SEPARATOR.join([counts, *anchors.flatten()])
    return hashlib.sha256(combined.encode("utf-8")).hexdigest()


def partition_embeddings(vectors: Sequence[Vector], counts: Sequence[int]) -> AnchorEmbeddings:
    """Split a flat batch of vectors back into positive, negative and neutral."""
    if len(vectors) != sum(counts):
        raise EmbeddingProviderError(
            f"Embedding provider returned {len(vectors)} vectors for {sum(counts)} anchors."
        )
    parts = []
    start = 0
    for count in counts:
        parts.append(tuple(vectors[start : start + count]))
        start += count
    return AnchorEmbeddings(*parts)


class AnchorEmbeddingCache:
    def __init__(self, embed_fn: EmbedFn) -> None:
        self._embed_fn = embed_fn
        self._entries: dict[str, AnchorEmbeddings] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, anchors: object) -> bool:
        return isinstance(anchors, AnchorSet) and cache_key(anchors) in self._entries

    def clear(self) -> None:
        self._entries.clear()
        self._locks.clear()

    async def get_anchor_embeddings(self, anchors: AnchorSet) -> AnchorEmbeddings:
        key = cache_key(anchors)
        cached = self._entries.get(key)
        if cached is not None:
            logger.debug("Anchor cache hit %s", key[:12])
            return cached

        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            cached = self._entries.get(key)
            if cached is not None:
                return cached
            embeddings = await self._compute(anchors, key)
            self._entries[key] = embeddings
            return embeddings

    async def _compute(self, anchors: AnchorSet, key: str) -> AnchorEmbeddings:
        empty = [sentiment.value for sentiment in SENTIMENTS if not anchors.phrases(sentiment)]
        if empty:
            names = ", ".join(empty)
            logger.warning("Anchor set has no %s anchors; their similarity is fixed at 0.", names)
            warnings.warn(
                f"Anchor set has no anchors for: {names}",
                DegenerateAnchorSetWarning,
                stacklevel=3,
            )

        phrases = anchors.flatten()
        logger.debug("Anchor cache miss %s; embedding %d phrases", key[:12], len(phrases))
        if not phrases:
            return AnchorEmbeddings()
        vectors = await self._embed_fn(phrases)
        return partition_embeddings(list(vectors), anchors.counts())
