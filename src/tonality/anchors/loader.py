"""Load anchor sets from JSON files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from tonality.errors import AnchorSetError
from tonality.types import AnchorSet, SENTIMENTS


def _clean_phrases(value: Any, key: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise AnchorSetError(f"'{key}' must be a list of strings.")
    phrases: list[str] = []
    for idx, item in enumerate(value):
        if not isinstance(item, str):
            raise AnchorSetError(f"'{key}[{idx}]' must be a string.")
        cleaned = item.strip()
        if cleaned:
            phrases.append(cleaned)
    return tuple(phrases)


def anchor_set_from_mapping(data: Any) -> AnchorSet:
    if not isinstance(data, dict):
        raise AnchorSetError("Anchor set must be a JSON object.")
    unknown = sorted(set(data) - {sentiment.value for sentiment in SENTIMENTS})
    if unknown:
        raise AnchorSetError(f"Unknown anchor categories: {', '.join(unknown)}")
    anchors = AnchorSet(
        **{
            sentiment.value: _clean_phrases(data.get(sentiment.value), sentiment.value)
            for sentiment in SENTIMENTS
        }
    )
    if not anchors.flatten():
        raise AnchorSetError("Anchor set contains no phrases.")
    return anchors


def load_anchor_set(path: Path) -> AnchorSet:
    if not path.exists():
        raise AnchorSetError(f"Anchor file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise AnchorSetError(f"Anchor file unreadable: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise AnchorSetError(f"Invalid JSON in anchor file: {exc}") from exc
    return anchor_set_from_mapping(data)
