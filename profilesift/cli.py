"""Command-line interface for profilesift."""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from profilesift import AnalyzerConfig, ProfileAnalyzer, classify, __version__
from profilesift.config import LogFormat
from profilesift.core.exporter import save_csv, save_many_json
from profilesift.exceptions import PreconditionError

app = typer.Typer(
    name="profilesift",
    help="Social profile signal extraction",
    add_completion=False,
)
console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"profilesift version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """profilesift - social profile signal extraction."""
    pass


@app.command()
def analyze(
    urls: list[str] = typer.Argument(..., help="Profile URLs to analyze"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output directory for JSON files"
    ),
    csv: Optional[Path] = typer.Option(
        None, "--csv", help="Also write all results to this CSV file (needs pandas)"
    ),
    delay: int = typer.Option(
        1000, "--delay", "-d", help="Delay between requests in ms"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress output, only show errors"
    ),
):
    """Scrape and analyze one or more profile URLs."""
    config = AnalyzerConfig(
        request_delay_ms=delay,
        log_format=LogFormat.CONSOLE if not quiet else LogFormat.JSON,
    )

    async def run():
        async with ProfileAnalyzer(config) as analyzer:
            return await analyzer.analyze_many(urls)

    try:
        results = asyncio.run(run())
    except PreconditionError as e:
        console.print(f"[red]✗[/red] {e.message}")
        raise typer.Exit(1)

    for result in results:
        if not quiet:
            _print_result(result)

    if output:
        for path in save_many_json(results, output):
            console.print(f"[dim]Saved to {path}[/dim]")
    if csv:
        console.print(f"[dim]Saved to {save_csv(results, csv)}[/dim]")

    low = sum(1 for r in results if r.confidence == "low")
    console.print(f"\n[bold]Analyzed {len(results)} profiles[/bold] ({low} low confidence)")


@app.command(name="classify")
def classify_command(
    urls: list[str] = typer.Argument(..., help="Profile URLs to classify"),
):
    """Show the detected platform and username without calling any service."""
    table = Table(show_header=True)
    table.add_column("URL", style="dim")
    table.add_column("Platform")
    table.add_column("Username")

    for url in urls:
        classification = classify(url)
        table.add_row(url, classification.platform.value, classification.username)

    console.print(table)


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Bind port"),
):
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("profilesift.api:app", host=host, port=port)


def _print_result(result):
    """Print analysis result as table."""
    p = result.profile
    flags = p.username_flags

    table = Table(title=f"{result.platform} · {p.username}", show_header=False)
    table.add_column("Field", style="dim")
    table.add_column("Value")

    table.add_row("Followers", f"{p.followers_count:,}")
    table.add_row("Following", f"{p.following_count:,}")
    table.add_row("Posts", f"{p.posts_count:,}")
    table.add_row("Bio length", str(p.bio_length))
    table.add_row("Account age", f"{p.account_age} days" if p.account_age else "-")
    table.add_row(
        "Flags",
        ", ".join(name for name, value in flags.model_dump().items() if value) or "-",
    )
    table.add_row("Confidence", _confidence_label(result.confidence))
    table.add_row("Notes", result.notes or "-")

    console.print(table)


def _confidence_label(confidence: str) -> str:
    colors = {"high": "green", "medium": "yellow", "low": "red"}
    return f"[{colors.get(confidence, 'white')}]{confidence}[/]"


if __name__ == "__main__":
    app()
