from .enrichment import EntryEnricher
from .models import Entry
from .session import JournalSession
from .storage import EntryStore

__all__ = ["Entry", "EntryEnricher", "EntryStore", "JournalSession"]
