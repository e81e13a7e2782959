"""Entry session: the ordered entry list plus its enrichment commits."""

from datetime import datetime
from typing import Optional

import structlog

from .enrichment import EntryEnricher
from .models import EnrichedFields, Entry, new_entry
from .storage import EntryStore

logger = structlog.get_logger()


class JournalSession:
    """Owns the entry list (most recent first) and persists every change.

    Enrichment reads a snapshot of one entry and commits by replacing that
    entry by id. Concurrent enrichments of the same id resolve last write wins.
    """

    def __init__(self, store: EntryStore, enricher: EntryEnricher):
        self.store = store
        self.enricher = enricher
        self._entries: list[Entry] = store.load()

    @property
    def entries(self) -> list[Entry]:
        return list(self._entries)

    def get(self, entry_id: str) -> Optional[Entry]:
        return next((e for e in self._entries if e.id == entry_id), None)

    def timestamps(self) -> list[datetime]:
        return [e.created_at for e in self._entries]

    def add(self, text: str, now: Optional[datetime] = None) -> Optional[Entry]:
        """Insert a placeholder entry at the front; None for blank text."""
        entry = new_entry(text, now)
        if entry is None:
            return None
        self._entries.insert(0, entry)
        self.store.save(self._entries)
        logger.info("entry_added", entry_id=entry.id, word_count=entry.word_count)
        return entry

    def _commit(self, updated: Entry) -> bool:
        for i, e in enumerate(self._entries):
            if e.id == updated.id:
                self._entries[i] = updated
                self.store.save(self._entries)
                return True
        return False

    async def enrich_entry(
        self, entry_id: str, now: Optional[datetime] = None
    ) -> Optional[EnrichedFields]:
        """Enrich one entry and replace it by id.

        Returns:
            The enrichment, or None if the entry is unknown or was removed
            before the enrichment finished
        """
        snapshot = self.get(entry_id)
        if snapshot is None:
            logger.warning("enrich_unknown_entry", entry_id=entry_id)
            return None

        fields = await self.enricher.enrich(snapshot.text, now)
        if not self._commit(snapshot.with_enrichment(fields)):
            logger.warning("enrich_entry_gone", entry_id=entry_id)
            return None

        logger.info(
            "entry_enriched",
            entry_id=entry_id,
            sentiment=str(fields.sentiment),
            fallback_used=fields.fallback_used,
        )
        return fields

    async def submit(
        self, text: str, now: Optional[datetime] = None
    ) -> tuple[Optional[Entry], Optional[EnrichedFields]]:
        """Add then enrich. Returns (enriched entry, fields) or (None, None) for blank text."""
        entry = self.add(text, now)
        if entry is None:
            return None, None
        fields = await self.enrich_entry(entry.id, now)
        return self.get(entry.id), fields
