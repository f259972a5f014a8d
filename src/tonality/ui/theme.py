"""Rich theme for the tonality CLI."""

from __future__ import annotations

from rich.theme import Theme

THEME = Theme(
    {
        "accent": "bright_blue",
        "title": "bold bright_blue",
        "subtitle": "dim",
        "step": "bold bright_blue",
        "border": "grey50",
        "info": "dim",
        "warning": "red3",
        "success": "green3",
        "error": "bold red3",
        "label": "dim",
        "value": "white",
        "path": "cyan",
        "positive": "green3",
        "negative": "red3",
        "neutral": "grey70",
    }
)
