"""Dashboard and streak CLI commands."""

from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from cli.utils import config_path_from_context, get_components

console = Console()

MOOD_BAR = {
    "positive": "[green]█[/]",
    "negative": "[red]█[/]",
    "neutral": "[dim]█[/]",
    "mixed": "[yellow]█[/]",
}


@click.command()
@click.option("-d", "--days", type=int, default=None, help="Window in days (config default)")
def dashboard(days: Optional[int]):
    """Show entry totals, sentiment mix, top themes and the daily trend."""
    from journal.stats import aggregate

    c = get_components(config_path_from_context())
    if days is None:
        days = c["config"].analysis.default_window_days
    if days <= 0:
        raise click.BadParameter("must be positive", param_hint="--days")

    stats = aggregate(c["session"].entries, days)

    console.print(f"\n[bold]Last {days} days[/]")
    console.print(
        f"Entries: {stats.total_entries}  |  Words: {stats.total_words}  |  "
        f"Avg words/entry: {stats.avg_words_per_entry}"
    )

    if stats.total_entries == 0:
        console.print("[yellow]No entries in this window.[/]")
        return

    mix = "  ".join(
        f"{MOOD_BAR.get(s, '')} {s}: {n}" for s, n in stats.sentiment_counts.items()
    )
    console.print(f"\n[bold]Sentiment:[/] {mix}")

    if stats.top_themes:
        themes = Table(title="Top themes", show_header=True)
        themes.add_column("Theme")
        themes.add_column("Entries", justify="right")
        for t in stats.top_themes:
            themes.add_row(t.theme, str(t.count))
        console.print(themes)

    trend = Table(title="Daily trend", show_header=True)
    trend.add_column("Day", style="dim")
    trend.add_column("Mood")
    for point in stats.trend:
        bars = (
            MOOD_BAR["positive"] * point.positive
            + MOOD_BAR["mixed"] * point.mixed
            + MOOD_BAR["neutral"] * point.neutral
            + MOOD_BAR["negative"] * point.negative
        )
        trend.add_row(point.date_label, bars or "[dim].[/]")
    console.print(trend)


@click.command()
def streak():
    """Show the current and longest journaling streak."""
    from journal.streaks import encouragement, streak_stats

    c = get_components(config_path_from_context())
    stats = streak_stats(c["session"].timestamps())

    console.print(f"\n[bold]Current streak:[/] {stats.current} day(s)")
    console.print(f"[bold]Longest streak:[/] {stats.longest} day(s)")
    console.print(f"[bold]Days journaled:[/] {stats.active_days}")
    if stats.last_entry_day:
        console.print(f"[dim]Last entry: {stats.last_entry_day.isoformat()}[/]")
    console.print(f"\n{encouragement(stats)}")
