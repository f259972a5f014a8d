"""CLI entrypoint for tonality."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
import sys
from typing import List, Optional
import warnings

import typer

from tonality.anchors import DEFAULT_ANCHORS, load_anchor_set
from tonality.config import DEFAULT_CONFIG_PATH, TonalityConfig, load_and_validate_config, resolve_config
from tonality.embeddings import create_embeddings_client
from tonality.env import load_dotenv
from tonality.errors import AnchorSetError, DegenerateAnchorSetWarning, TonalityError
from tonality.service import SentimentService, parse_reviews, summarize
from tonality.types import AnchorSet, ReviewResult
from tonality.ui.console import configure_logging
from tonality.ui.progress import status_spinner
from tonality.ui.render import (
    render_anchor_set,
    render_banner,
    render_error,
    render_info,
    render_results_table,
    render_sentiment_summary,
    render_validation_panel,
    render_warning,
)

app = typer.Typer(add_completion=False, help="Anchor-based embedding sentiment classification.")
anchors_app = typer.Typer(add_completion=False, help="Inspect sentiment anchor sets.")
config_app = typer.Typer(add_completion=False, help="Config helpers and validation.")
app.add_typer(anchors_app, name="anchors")
app.add_typer(config_app, name="config")


@app.callback(invoke_without_command=True)
def root(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging."),
) -> None:
    """tonality sentiment CLI."""
    load_dotenv()
    configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)


@app.command("classify")
def classify_command(
    texts: Optional[List[str]] = typer.Argument(None, help="Reviews to classify."),
    file: Optional[str] = typer.Option(None, "--file", "-f", help="Read reviews from a file, one per line ('-' for stdin)."),
    anchors: Optional[str] = typer.Option(None, "--anchors", "-a", help="JSON anchor set file."),
    mode: Optional[str] = typer.Option(None, "--mode", "-m", help="Embeddings mode: mock, openai or openrouter."),
    model: Optional[str] = typer.Option(None, "--model", help="Embedding model name."),
    config_path: Optional[str] = typer.Option(None, "--config", "-c", help="Config file path."),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON."),
) -> None:
    """Classify reviews against the sentiment anchors."""
    try:
        config = resolve_config(
            path=Path(config_path) if config_path else None,
            mode=mode,
            model=model,
            anchors_path=anchors,
        )
    except ValueError as exc:
        render_error(str(exc))
        raise typer.Exit(code=1) from exc

    reviews = list(texts or [])
    if file:
        reviews.extend(_read_reviews(file))
    if not reviews:
        render_error("No reviews given. Pass texts as arguments or use --file.")
        raise typer.Exit(code=1)

    anchor_set = _load_anchors(config.anchors_path)

    if not as_json:
        render_banner("tonality", f"Classifying {len(reviews)} reviews")
        for note in config.notes:
            render_warning(note)

    try:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always", DegenerateAnchorSetWarning)
            if as_json:
                results = asyncio.run(_classify(config, reviews, anchor_set))
            else:
                with status_spinner("Embedding and classifying"):
                    results = asyncio.run(_classify(config, reviews, anchor_set))
    except TonalityError as exc:
        render_error(str(exc))
        raise typer.Exit(code=1) from exc

    degenerate = sorted(
        {str(item.message) for item in caught if issubclass(item.category, DegenerateAnchorSetWarning)}
    )
    summary = summarize(results)
    if as_json:
        payload = {
            "config": config.to_dict(),
            "results": [review.to_dict() for review in results],
            "summary": summary.to_dict(),
            "warnings": degenerate,
        }
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    for message in degenerate:
        render_warning(message)
    render_results_table(results)
    render_sentiment_summary(summary)
    render_info(f"Embeddings: {config.embeddings.mode} · {config.embeddings.resolved_model}")


@anchors_app.command("show")
def anchors_show(
    anchors: Optional[str] = typer.Option(None, "--anchors", "-a", help="JSON anchor set file."),
) -> None:
    """Display the anchor set that classification would use."""
    anchor_set = _load_anchors(anchors)
    render_anchor_set(anchor_set, anchors or "built-in defaults")


@config_app.command("validate")
def config_validate(path: str = typer.Option(str(DEFAULT_CONFIG_PATH), "--path", "-p")) -> None:
    """Validate a config file without classifying anything."""
    result = load_and_validate_config(Path(path))

    errors = [f"{issue.path}: {issue.message}" for issue in result.errors]
    warnings_ = [f"{issue.path}: {issue.message}" for issue in result.warnings]

    if errors:
        render_validation_panel("INVALID", errors, style="error")
        raise typer.Exit(code=1)

    if warnings_:
        render_validation_panel("VALID (with warnings)", warnings_, style="warning")
    else:
        render_validation_panel("VALID", ["No issues found."], style="success")


async def _classify(config: TonalityConfig, reviews: list[str], anchor_set: AnchorSet) -> list[ReviewResult]:
    client = create_embeddings_client(
        config.embeddings.mode,
        config.embeddings.resolved_model,
        base_url=config.embeddings.base_url,
        timeout_s=config.embeddings.timeout_s,
    )
    async with SentimentService(client) as service:
        return await service.classify_all(reviews, anchor_set)


def _read_reviews(file: str) -> list[str]:
    if file == "-":
        return parse_reviews(sys.stdin.read())
    try:
        return parse_reviews(Path(file).read_text(encoding="utf-8"))
    except OSError as exc:
        render_error(f"Could not read reviews: {exc}")
        raise typer.Exit(code=1) from exc


def _load_anchors(path: str | None) -> AnchorSet:
    if not path:
        return DEFAULT_ANCHORS
    try:
        return load_anchor_set(Path(path))
    except AnchorSetError as exc:
        render_error(str(exc))
        raise typer.Exit(code=1) from exc


def main() -> None:
    app()


if __name__ == "__main__":
    main()
