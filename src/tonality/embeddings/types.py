"""Embedding response types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class EmbeddingResult:
    text: str
    embedding: tuple[float, ...]
    model: str
    dims: int
    raw: dict[str, Any] = field(default_factory=dict, compare=False)
