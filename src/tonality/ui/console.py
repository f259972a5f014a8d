"""Shared consoles and logging setup for the tonality CLI."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from tonality.ui.theme import THEME

_CONSOLE = Console(theme=THEME, highlight=False)
# Log records go to stderr so `--json` output on stdout stays parseable.
_LOG_CONSOLE = Console(theme=THEME, highlight=False, stderr=True)


def get_console() -> Console:
    return _CONSOLE


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    handler = RichHandler(console=_LOG_CONSOLE, show_path=False, rich_tracebacks=verbose)
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)
