"""Minimal .env loader for the tonality CLI."""

from __future__ import annotations

import os
from pathlib import Path


def parse_dotenv(text: str) -> dict[str, str]:
    values: dict[str, str] = {}
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        if stripped.startswith("export "):
            stripped = stripped[len("export "):].lstrip()
        key, value = (part.strip() for part in stripped.split("=", 1))
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        if key and value:
            values[key] = value
    return values


def load_dotenv(path: str = ".env") -> list[str]:
    """Export keys from ``path`` that are not already set; returns the keys applied."""
    env_path = Path(path)
    try:
        text = env_path.read_text(encoding="utf-8")
    except OSError:
        return []
    applied: list[str] = []
    for key, value in parse_dotenv(text).items():
        if key not in os.environ:
            os.environ[key] = value
            applied.append(key)
    return applied
