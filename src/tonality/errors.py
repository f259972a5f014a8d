"""Error and warning types raised by tonality."""

from __future__ import annotations

from dataclasses import dataclass


class TonalityError(Exception):
    """Base class for tonality errors."""


@dataclass(eq=False)
class EmbeddingProviderError(TonalityError, RuntimeError):
    message: str
    status_code: int | None = None

    def __str__(self) -> str:
        if self.status_code is None:
            return f"Embedding provider error: {self.message}"
        return f"Embedding provider error {self.status_code}: {self.message}"


class NotInitializedError(TonalityError):
    """Classification was attempted without anchor embeddings."""


class AnchorSetError(TonalityError, ValueError):
    """An anchor set could not be loaded or is malformed."""


class DegenerateAnchorSetWarning(UserWarning):
    """A sentiment class has no anchors; its similarity is forced to 0."""
