"""Period insights, theme analysis and writing prompt commands."""

import asyncio

import click
from rich.console import Console
from rich.table import Table

from cli.utils import config_path_from_context, get_components

console = Console()

TREND_STYLE = {
    "increasing": "[green]increasing[/]",
    "decreasing": "[red]decreasing[/]",
    "stable": "[dim]stable[/]",
}

OFFLINE_NOTE = "[dim]offline analysis[/]"


def _bullets(title: str, items: list[str]):
    if not items:
        return
    console.print(f"\n[bold]{title}[/]")
    for item in items:
        console.print(f"  - {item}")


@click.command()
@click.option(
    "-p", "--period", default="week", type=click.Choice(["week", "month"]), help="Summary period"
)
def insights(period: str):
    """Summarize this week's or month's entries."""
    from journal.insights import generate_period_insight

    c = get_components(config_path_from_context())
    with console.status("Looking back over your entries..."):
        summary = asyncio.run(
            generate_period_insight(c["session"].entries, period, c["analyzer"])
        )

    if summary.is_empty:
        console.print(f"[yellow]No entries this {period} yet. Write one to see insights.[/]")
        return

    console.print(f"\n[bold]This {period}:[/] {summary.entry_count} entries")
    console.print(f"[bold]Overall tone:[/] {summary.dominant_sentiment}")
    if summary.top_themes:
        console.print(f"[bold]Top themes:[/] {', '.join(summary.top_themes)}")
    if summary.summary:
        console.print(f"\n{summary.summary}")

    _bullets("Patterns", summary.patterns)
    _bullets("Recommendations", summary.recommendations)
    _bullets("Growth areas", summary.growth_areas)

    if summary.positive_highlights:
        console.print("\n[bold green]Positive moments[/]")
        for e in summary.positive_highlights:
            preview = e.text.replace("\n", " ")[:80]
            console.print(f"  [dim]{e.created_at.strftime('%a %b %d')}[/] {preview}")

    if summary.fallback_used:
        console.print(f"\n{OFFLINE_NOTE}")


@click.command()
@click.option("-n", "--limit", default=8, help="Max themes to show")
def themes(limit: int):
    """Analyze recurring themes across all entries."""
    from journal.themes import discover_themes

    c = get_components(config_path_from_context())
    with console.status("Finding recurring themes..."):
        results, fallback_used = asyncio.run(
            discover_themes(c["session"].entries, c["analyzer"], limit=limit)
        )

    if not results:
        console.print("[yellow]No themes yet. Add entries to see recurring topics.[/]")
        return

    table = Table(title="Themes", show_header=True, caption=OFFLINE_NOTE if fallback_used else None)
    table.add_column("Theme")
    table.add_column("Entries", justify="right")
    table.add_column("Share", justify="right")
    table.add_column("Tone")
    table.add_column("Trend", justify="center")
    table.add_column("Related", style="dim")

    for t in results:
        table.add_row(
            t.theme,
            str(t.frequency),
            f"{t.percentage}%",
            str(t.sentiment),
            TREND_STYLE.get(str(t.trend), str(t.trend)),
            ", ".join(t.related_themes),
        )

    console.print(table)


@click.command()
@click.option("-g", "--goal", "goals", multiple=True, help="A goal to steer prompts (repeatable)")
def prompts(goals: tuple[str, ...]):
    """Suggest writing prompts based on recent entries."""
    from journal.prompts import generate_prompts

    c = get_components(config_path_from_context())
    goals = list(goals) or c["config"].analysis.goals
    with console.status("Thinking of prompts..."):
        suggestions, fallback_used = asyncio.run(
            generate_prompts(c["session"].entries, c["analyzer"], goals)
        )

    for p in suggestions:
        console.print(f"\n[cyan]{p.text}[/]")
        console.print(f"[dim]{p.category} - {p.context}[/]")
    if fallback_used:
        console.print(f"\n{OFFLINE_NOTE}")
