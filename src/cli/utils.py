"""Shared CLI utilities."""

import sys
from pathlib import Path
from typing import Optional

import click
import structlog
from rich.console import Console

console = Console()
logger = structlog.get_logger()


def get_components(config_path: Optional[Path] = None, offline: bool = False) -> dict:
    """Initialize config, storage, the remote analyzer, enrichment and the session.

    Args:
        config_path: Explicit config file (defaults to the standard locations)
        offline: Skip the remote model even when one is configured
    """
    from cli.config import load_config_model
    from journal import EntryEnricher, EntryStore, JournalSession
    from journal.analysis import analyzer_from_config
    from llm import provider_from_config

    try:
        config = load_config_model(config_path)
    except ValueError as e:
        console.print(f"[red]Config error:[/] {e}")
        sys.exit(1)

    provider = None if offline else provider_from_config(config.llm)
    enricher = EntryEnricher(
        analyzer=analyzer_from_config(provider, config),
        with_suggestions=config.analysis.suggestions,
    )
    store = EntryStore(config.paths.data_file)

    try:
        session = JournalSession(store, enricher)
    except ValueError as e:
        console.print(f"[red]Storage error:[/] {e}")
        sys.exit(1)

    return {
        "config": config,
        "store": store,
        "analyzer": enricher.analyzer,
        "enricher": enricher,
        "session": session,
    }


def config_path_from_context() -> Optional[Path]:
    """The --config path given to the root group, if any."""
    ctx = click.get_current_context(silent=True)
    if ctx is None:
        return None
    root = ctx.find_root()
    return (root.obj or {}).get("config_path")
