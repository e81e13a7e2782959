"""Data export CLI command."""

from pathlib import Path

import click
from rich.console import Console

from cli.utils import config_path_from_context, get_components

console = Console()


@click.command()
@click.option("-o", "--output", required=True, type=click.Path(), help="Output path")
@click.option(
    "-f",
    "--format",
    "fmt",
    default="json",
    type=click.Choice(["json", "markdown"]),
    help="Export format",
)
def export(output: str, fmt: str):
    """Export all entries."""
    from journal.export import export_json, export_markdown

    c = get_components(config_path_from_context())
    entries = c["session"].entries
    output_path = Path(output)

    with console.status("Exporting..."):
        if fmt == "json":
            count = export_json(entries, output_path)
        else:
            count = export_markdown(entries, output_path)

    console.print(f"[green]Exported {count} entries to {output_path}[/]")
