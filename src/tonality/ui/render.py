"""Render helpers for the tonality CLI."""

from __future__ import annotations

from typing import Mapping, Sequence

from rich import box
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from tonality.types import AnchorSet, ReviewResult, SENTIMENTS, SentimentSummary
from tonality.ui.console import get_console


def _panel(body, title: str, *, border_style: str = "border") -> Panel:
    return Panel(
        body,
        title=Text(title, style="step"),
        title_align="left",
        box=box.ROUNDED,
        border_style=border_style,
        padding=(0, 2),
        expand=True,
    )


def render_banner(title: str, subtitle: str) -> None:
    console = get_console()
    console.print(_panel(Group(Text(subtitle, style="subtitle")), title))
    console.print()


def render_info(text: str) -> None:
    console = get_console()
    console.print(text, style="info", markup=False)


def render_warning(text: str) -> None:
    console = get_console()
    console.print(text, style="warning", markup=False)


def render_error(text: str) -> None:
    console = get_console()
    panel = Panel(
        Text(text, style="error"),
        box=box.ROUNDED,
        border_style="error",
        padding=(0, 2),
        expand=True,
    )
    console.print(panel)


def render_summary_table(rows: Mapping[str, str] | Sequence[tuple[str, str]], title: str = "Summary") -> None:
    console = get_console()
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column(style="label", no_wrap=True, justify="right")
    table.add_column(style="value")

    items = rows.items() if hasattr(rows, "items") else rows
    for key, value in items:
        table.add_row(Text(str(key), style="label"), Text(str(value), style="value"))
    console.print()
    console.print(_panel(table, title))


def render_validation_panel(title: str, issues: Sequence[str], *, style: str) -> None:
    console = get_console()
    lines = [Text(f"- {issue}", style=style) for issue in issues]
    console.print(_panel(Group(*lines), title))


def render_results_table(results: Sequence[ReviewResult], *, max_text: int = 120) -> None:
    console = get_console()
    table = Table(show_header=True, box=box.SIMPLE_HEAD, pad_edge=False, expand=True)
    table.add_column("#", style="label", justify="right", no_wrap=True)
    table.add_column("Review", style="value", ratio=1)
    table.add_column("Sentiment", no_wrap=True)
    table.add_column("Confidence", justify="right", no_wrap=True)
    for review in results:
        text = review.text if len(review.text) <= max_text else review.text[:max_text] + "..."
        label = review.label.value
        table.add_row(
            str(review.index + 1),
            Text(text),
            Text(label, style=label),
            f"{review.confidence:.3f}",
        )
    console.print(_panel(table, "Classifications"))


def render_sentiment_summary(summary: SentimentSummary) -> None:
    rows: list[tuple[str, str]] = [("Reviews", str(summary.total))]
    for sentiment in SENTIMENTS:
        rows.append(
            (
                sentiment.value.capitalize(),
                f"{summary.counts[sentiment]} ({summary.percentages[sentiment]}%)",
            )
        )
    rows.append(("Overall rating", summary.overall_rating))
    rows.append(("Avg confidence", f"{summary.average_confidence:.3f}"))
    render_summary_table(rows, title="Sentiment Summary")


def render_anchor_set(anchors: AnchorSet, source: str) -> None:
    console = get_console()
    lines: list[Text] = [Text(f"Source: {source}", style="path"), Text("")]
    for sentiment in SENTIMENTS:
        phrases = anchors.phrases(sentiment)
        lines.append(Text(f"{sentiment.value} ({len(phrases)})", style=sentiment.value))
        if not phrases:
            lines.append(Text("  (none)", style="warning"))
        for phrase in phrases:
            lines.append(Text(f"  - {phrase}", style="value"))
        lines.append(Text(""))
    console.print(_panel(Group(*lines), "Anchor Set"))
