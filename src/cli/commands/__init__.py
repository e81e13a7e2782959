"""CLI command modules."""

from .dashboard import dashboard, streak
from .entries import list_entries, write
from .export import export
from .insights import insights, prompts, themes

__all__ = [
    "write",
    "list_entries",
    "dashboard",
    "streak",
    "insights",
    "themes",
    "prompts",
    "export",
]
