"""Entry CLI commands: write and list."""

import asyncio

import click
import structlog
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from cli.utils import config_path_from_context, get_components
from observability import log_run_summary

console = Console()
logger = structlog.get_logger()

SENTIMENT_STYLE = {
    "positive": "green",
    "negative": "red",
    "mixed": "yellow",
    "neutral": "dim",
}


def _styled(sentiment: str) -> str:
    style = SENTIMENT_STYLE.get(sentiment, "dim")
    return f"[{style}]{sentiment}[/]"


@click.command()
@click.argument("text", required=False)
def write(text: str):
    """Write a new entry and analyze it. Opens editor if no text provided."""
    if not text:
        text = click.edit("\n")
    if not text or not text.strip():
        console.print("[yellow]No content provided, cancelled.[/]")
        return

    c = get_components(config_path_from_context())

    with console.status("Reflecting on your entry..."):
        entry, fields = asyncio.run(c["session"].submit(text))

    if entry is None or fields is None:
        console.print("[red]Entry could not be saved.[/]")
        return

    body = [
        f"[bold]Sentiment:[/] {_styled(str(entry.sentiment))}",
        f"[bold]Themes:[/] {', '.join(entry.display_themes)}",
        f"[bold]Words:[/] {entry.word_count}  |  [bold]Intensity:[/] {entry.emotional_intensity}/10",
    ]
    if entry.key_topics:
        body.append(f"[bold]Key topics:[/] {', '.join(entry.key_topics)}")
    body.append("")
    body.append(entry.insight_note or "")

    subtitle = "[dim]offline analysis[/]" if fields.fallback_used else None
    console.print(Panel("\n".join(body), title="Entry saved", subtitle=subtitle))

    if fields.suggestions:
        console.print("\n[bold]You might try:[/]")
        for s in fields.suggestions:
            console.print(f"  - {s}")

    log_run_summary()


@click.command("list")
@click.option("-n", "--limit", default=10, help="Max entries to show")
def list_entries(limit: int):
    """List recent entries."""
    c = get_components(config_path_from_context())
    entries = c["session"].entries[:limit]

    if not entries:
        console.print("[yellow]No entries yet. Run 'companion write' to add one.[/]")
        return

    table = Table(show_header=True)
    table.add_column("Date", style="cyan")
    table.add_column("Mood")
    table.add_column("Themes", style="dim")
    table.add_column("Words", justify="right")
    table.add_column("Entry")

    for e in entries:
        preview = e.text.replace("\n", " ")
        table.add_row(
            e.created_at.strftime("%Y-%m-%d %H:%M"),
            _styled(str(e.sentiment)),
            ", ".join(e.display_themes[:3]),
            str(e.word_count),
            preview[:40] + ("..." if len(preview) > 40 else ""),
        )

    console.print(table)
