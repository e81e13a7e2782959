"""JSON blob storage for the entry list."""

import json
import os
from pathlib import Path

import structlog

from .models import Entry

logger = structlog.get_logger()


class EntryStore:
    """Reads and writes the whole entry list as one JSON document.

    Layout: {"entries": [<Entry.to_dict()>, ...]}, most recent first.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    def load(self) -> list[Entry]:
        """Read all entries.

        Returns:
            Stored entries; empty when the file does not exist yet

        Raises:
            ValueError: If the file is not a valid entries document
        """
        if not self.path.exists():
            return []

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Corrupt entries file {self.path}: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("entries", []), list):
            raise ValueError(f"Unexpected entries file layout in {self.path}")

        entries = []
        for raw in data.get("entries", []):
            try:
                entries.append(Entry.from_dict(raw))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning("entry_skipped", path=str(self.path), error=str(e))
        return entries

    def save(self, entries: list[Entry]) -> None:
        """Replace the stored list; written to a temp file then renamed."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        payload = {"entries": [e.to_dict() for e in entries]}
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
            os.replace(tmp, self.path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise
        logger.debug("entries_saved", path=str(self.path), count=len(entries))
