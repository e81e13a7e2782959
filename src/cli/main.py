"""CLI entry point for journal-companion."""

import sys
from pathlib import Path

import click
from rich.console import Console

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from cli.commands import (  # noqa: E402
    dashboard,
    export,
    insights,
    list_entries,
    prompts,
    streak,
    themes,
    write,
)
from cli.config import load_config_model  # noqa: E402
from cli.logging_config import setup_logging  # noqa: E402

console = Console()


@click.group()
@click.version_option(version="0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Config file (default: ./config.yaml or ~/.journal-companion/config.yaml)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Path):
    """Journal Companion - reflective journaling with sentiment and theme insights."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path

    try:
        config = load_config_model(config_path)
    except ValueError as e:
        console.print(f"[red]Config error:[/] {e}")
        sys.exit(1)

    level = "DEBUG" if verbose else config.logging.level
    setup_logging(
        json_mode=config.logging.json_output, level=level, log_file=config.paths.log_file
    )


cli.add_command(write)
cli.add_command(list_entries)
cli.add_command(dashboard)
cli.add_command(streak)
cli.add_command(insights)
cli.add_command(themes)
cli.add_command(prompts)
cli.add_command(export)


if __name__ == "__main__":
    cli()
