"""Command-line interface for seolens."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click
import structlog
import uvicorn
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from seolens import __version__
from seolens.cms import FetchError
from seolens.config import load_config
from seolens.container import DependencyContainer
from seolens.observability import configure_logging
from seolens.presentation import split_narrative
from seolens.protocols import AnalysisResult, HeadlineScore

console = Console()
logger = structlog.get_logger(__name__)


def _score_style(score: int) -> str:
    if score >= 70:
        return "green"
    if score >= 40:
        return "yellow"
    return "red"


def _build_container(ctx: click.Context, **oracle_overrides: Any) -> DependencyContainer:
    config = load_config(ctx.obj["config_path"])
    if oracle_overrides:
        config = config.model_copy(update={"oracle": config.oracle.model_copy(update=oracle_overrides)})
    container = DependencyContainer(ctx.obj["config_path"], config=config)
    monitoring = container.config.monitoring
    if ctx.obj["log_level"]:
        monitoring = monitoring.model_copy(update={"log_level": ctx.obj["log_level"]})
    configure_logging(monitoring)
    return container


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", type=click.Path(exists=True), help="Configuration file path")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level (overrides configuration)",
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], log_level: Optional[str]) -> None:
    """seolens - SEO analysis for ButterCMS blog content."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config) if config else None
    ctx.obj["log_level"] = log_level


def render_result(result: AnalysisResult) -> None:
    data = result.to_dict()

    overview = Table(title=data["title"] or data["url"], show_header=False)
    overview.add_column("Metric", style="cyan")
    overview.add_column("Value", style="magenta")
    score = data["content_score"]
    overview.add_row("Content score", f"[{_score_style(score)}]{score}/100[/]")
    headline = data["headline_score"]
    headline_text = f"[{_score_style(headline)}]{headline}/100[/]"
    if data["headline_score_degraded"]:
        headline_text += " (unavailable)"
    overview.add_row("Headline score", headline_text)
    overview.add_row("Words", str(data["word_count"]))
    overview.add_row("Read time", data["read_time"])
    overview.add_row("Headings", str(data["headings_count"]))
    overview.add_row("Paragraphs", str(data["paragraphs_count"]))
    overview.add_row("Images", str(data["images_count"]))
    console.print(overview)

    breakdown = Table(title="Score breakdown")
    breakdown.add_column("Factor", style="cyan")
    breakdown.add_column("Points", justify="right")
    for factor, points in data["score_breakdown"].items():
        breakdown.add_row(factor, f"{points:g}")
    console.print(breakdown)

    if data["terms"]:
        terms = Table(title="Top terms")
        terms.add_column("Term", style="cyan")
        terms.add_column("Count", justify="right")
        terms.add_column("Density", justify="right")
        density: Dict[str, float] = data["keyword_density"]
        for entry in data["terms"]:
            pct = density.get(entry["term"])
            terms.add_row(entry["term"], str(entry["count"]), f"{pct:.2f}%" if pct is not None else "")
        console.print(terms)

    for section in split_narrative(result.narrative):
        console.print(Panel(section.body or "-", title=section.label, title_align="left"))


def render_headline(result: HeadlineScore) -> None:
    table = Table(title=result.headline, show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="magenta")
    table.add_row("Score", f"[{_score_style(result.score)}]{result.score}/100[/]")
    if result.word_counts is None:
        table.add_row("Word categories", "unavailable")
    else:
        for name, count in vars(result.word_counts).items():
            table.add_row(f"{name} words", str(count))
    console.print(table)


@cli.command()
@click.argument("url")
@click.option("--json", "as_json", is_flag=True, help="Print the analysis as JSON")
@click.option("--no-narrative", is_flag=True, help="Skip the free-form oracle analysis")
@click.pass_context
def analyze(ctx: click.Context, url: str, as_json: bool, no_narrative: bool) -> None:
    """Analyze the ButterCMS post or page at URL."""
    overrides = {"narrative_enabled": False} if no_narrative else {}
    container = _build_container(ctx, **overrides)

    async def run_analysis() -> AnalysisResult:
        async with container.lifecycle():
            return await container.get_pipeline().analyze_url(url)

    try:
        result = asyncio.run(run_analysis())
    except FetchError as e:
        console.print(f"[red]Error fetching content: {e}[/red]")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        render_result(result)


@cli.command()
@click.argument("text")
@click.option("--json", "as_json", is_flag=True, help="Print the score as JSON")
@click.pass_context
def headline(ctx: click.Context, text: str, as_json: bool) -> None:
    """Score a single headline."""
    container = _build_container(ctx)

    async def run_scoring() -> HeadlineScore:
        async with container.lifecycle():
            return await container.get_pipeline().score_headline(text)

    result = asyncio.run(run_scoring())
    if as_json:
        payload: Dict[str, Any] = {
            "headline": result.headline,
            "score": result.score,
            "word_counts": vars(result.word_counts) if result.word_counts else None,
            "degraded": result.degraded,
        }
        click.echo(json.dumps(payload, indent=2))
    else:
        render_headline(result)


@cli.command()
@click.option("--host", default=None, help="Host to bind to (defaults to configuration)")
@click.option("--port", default=None, type=int, help="Port to bind to (defaults to configuration)")
@click.pass_context
def serve(ctx: click.Context, host: Optional[str], port: Optional[int]) -> None:
    """Start the HTTP API."""
    container = _build_container(ctx)
    from seolens.web.main import create_app

    bind_host = host or container.config.web.host
    bind_port = port or container.config.web.port
    console.print(f"[green]Starting seolens API at http://{bind_host}:{bind_port}[/green]")
    uvicorn.run(create_app(container=container), host=bind_host, port=bind_port, log_level="info")


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
