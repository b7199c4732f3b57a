"""Command-line interface for the trust-scoring system using Typer and Rich."""

import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from truthcheck_system.agents.sifters.credibility import DomainBiasResolver
from truthcheck_system.config.logging import configure_logging, get_logger
from truthcheck_system.config.settings import settings
from truthcheck_system.data_management.schemas import ScoredClaim, is_unavailable
from truthcheck_system.pipelines import TrustPipeline, trust_band

app = typer.Typer(
    help="TruthCheck - claim extraction and trust scoring for article text",
    add_completion=False,
)

console = Console()

logger = get_logger("cli")

BAND_STYLES = {"high": "green", "medium": "yellow", "low": "red"}


@app.command()
def status() -> None:
    """
    Display system status and configuration.

    Shows API configuration, scoring limits and logging settings.
    """
    logger.info("Displaying system status")

    table = Table(title="TruthCheck Status", show_header=True, header_style="bold magenta")
    table.add_column("Component", style="cyan", width=20)
    table.add_column("Status", style="green", width=15)
    table.add_column("Details", style="yellow")

    python_version = f"Python {sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"
    table.add_row("Environment", "✓ Ready", python_version)

    gemini_status = "✓ Configured" if settings.gemini_api_key else "⚠ Not Configured"
    table.add_row("Gemini API", gemini_status, f"{settings.gemini_model} (RPM: {settings.max_rpm})")

    serper_status = "✓ Configured" if settings.serper_api_key else "⚠ Not Configured"
    table.add_row(
        "Serper Search",
        serper_status,
        f"web: {settings.web_max_results}, scholar: {settings.scholar_max_results} results",
    )

    table.add_row(
        "Extraction",
        "✓ Active",
        f"threshold {settings.check_worthiness_threshold}, max {settings.max_claims_per_article} claims",
    )
    table.add_row(
        "Timeouts",
        "✓ Active",
        f"LM {settings.llm_scorer_timeout}s, search {settings.search_scorer_timeout}s",
    )
    table.add_row("Cache", "✓ Active", f"TTL {settings.cache_ttl_seconds}s (in-memory)")

    snapshot = settings.bias_snapshot_path or settings.bias_snapshot_url or "built-in table"
    table.add_row("Bias Table", "✓ Active", str(snapshot))

    log_details = f"Level: {settings.log_level}, Format: {settings.log_format}"
    table.add_row("Logging", "✓ Active", log_details)

    console.print(table)


def _format_signal(value) -> str:
    return "n/a" if is_unavailable(value) else f"{float(value):.1f}"


def _render_results(scored: List[ScoredClaim]) -> None:
    table = Table(title="Scored Claims", show_header=True, header_style="bold magenta")
    table.add_column("#", style="dim", width=4)
    table.add_column("Claim", style="white", ratio=3)
    table.add_column("Type", style="cyan")
    table.add_column("AI", justify="right")
    table.add_column("Tone", justify="right")
    table.add_column("Scholar", justify="right")
    table.add_column("Web", justify="right")
    table.add_column("Trust", justify="right")

    for record in scored:
        band = trust_band(record.trust_score)
        table.add_row(
            str(record.id),
            record.text,
            record.classification.value,
            _format_signal(record.scores.ai_rating),
            _format_signal(record.scores.tone),
            _format_signal(record.scores.scholarly_match),
            _format_signal(record.scores.web_reinforced),
            f"[{BAND_STYLES[band]}]{record.trust_score:.1f}[/{BAND_STYLES[band]}]",
        )
    console.print(table)

    notes = {record.id: record.degradation_note for record in scored if record.degradation_note}
    for claim_id, note in notes.items():
        console.print(f"[yellow]⚠ Claim {claim_id}:[/yellow] {note}")


def _render_summary(summary: dict) -> None:
    bands = summary["trust_bands"]
    classes = summary["classifications"]
    spectrum = summary["spectrum"]
    body = (
        f"Claims: {summary['total_claims']}  Average trust: {summary['average_trust']}\n"
        f"High: {bands['high']}  Medium: {bands['medium']}  Low: {bands['low']}\n"
        + "  ".join(f"{name}: {count}" for name, count in classes.items())
        + f"\nSources - left: {spectrum['left']}  center: {spectrum['center']}  "
        f"right: {spectrum['right']}  unknown: {spectrum['unknown']}"
    )
    console.print(Panel(body, title="Summary", border_style="cyan"))


async def _analyze(text: str, source_url: Optional[str]):
    pipeline = TrustPipeline.from_settings()
    try:
        scored = await pipeline.run(text, source_url=source_url)
        return scored, pipeline.summarize(), pipeline.stats.to_dict()
    finally:
        await pipeline.aclose()


@app.command()
def analyze(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Article text file"),
    source_url: Optional[str] = typer.Option(None, "--source-url", help="URL the article was published at"),
    as_json: bool = typer.Option(False, "--json", help="Print machine-readable JSON"),
) -> None:
    """
    Extract, classify and trust-score the claims in an article.
    """
    if as_json:
        configure_logging(level="ERROR")

    text = file.read_text(encoding="utf-8")
    logger.info(f"Analyzing {file}", source_url=source_url)

    scored, summary, stats = asyncio.run(_analyze(text, source_url))

    if as_json:
        payload = {
            "claims": [record.model_dump(mode="json") for record in scored],
            "summary": summary,
            "stats": stats,
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    if not scored:
        console.print("[yellow]No check-worthy claims found.[/yellow]")
        return

    _render_results(scored)
    _render_summary(summary)
    console.print(f"[dim]Run {stats['run_id']} finished in {stats['duration_seconds']}s[/dim]")


@app.command()
def bias(domain: str = typer.Argument(..., help="Domain or URL to classify")) -> None:
    """
    Print the political lean of a domain.
    """
    resolver = DomainBiasResolver(snapshot_path=settings.bias_snapshot_path)
    lean = resolver.classify(domain)
    console.print(f"[cyan]{domain}[/cyan]: [bold]{lean}[/bold]")


@app.command("reload-bias")
def reload_bias(
    source: Optional[str] = typer.Argument(
        None, help="URL or JSON file with a domain -> lean mapping (default: BIAS_SNAPSHOT_URL)"
    ),
) -> None:
    """
    Load a bias table snapshot and persist it to the configured snapshot path.
    """
    source = source or settings.bias_snapshot_url
    if not source:
        console.print("[red]✗ No source given and BIAS_SNAPSHOT_URL not set[/red]")
        raise typer.Exit(code=2)

    resolver = DomainBiasResolver(snapshot_path=settings.bias_snapshot_path)
    if asyncio.run(resolver.reload(source)):
        console.print(f"[green]✓ Loaded {len(resolver.table)} domains from {source}[/green]")
        if not settings.bias_snapshot_path:
            console.print("[yellow]⚠ BIAS_SNAPSHOT_PATH not set, snapshot not persisted[/yellow]")
        return

    console.print(f"[red]✗ Could not load bias snapshot from {source}; previous table kept[/red]")
    raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
