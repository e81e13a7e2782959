"""Tests for JournalSession: placeholder insert, enrichment commit, persistence."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from journal.analysis import AnalysisError
from journal.enrichment import EntryEnricher
from journal.models import EnrichedFields
from journal.session import JournalSession
from journal.storage import EntryStore
from shared_types import Sentiment


@pytest.fixture
def store(tmp_path):
    return EntryStore(tmp_path / "entries.json")


@pytest.fixture
def session(store):
    return JournalSession(store, EntryEnricher())


class TestAdd:
    def test_placeholder_at_front(self, session, now):
        first = session.add("first entry", now=now)
        second = session.add("second entry", now=now)

        assert [e.id for e in session.entries] == [second.id, first.id]
        assert second.sentiment == Sentiment.NEUTRAL
        assert second.themes == []
        assert second.word_count == 2
        assert len(second.id) == 16

    def test_blank_text_rejected(self, session, store):
        assert session.add("   \n") is None
        assert session.entries == []
        assert not store.path.exists()

    def test_persisted_immediately(self, session, store):
        entry = session.add("saved right away")
        assert [e.id for e in store.load()] == [entry.id]

    def test_entries_is_a_copy(self, session):
        session.add("one")
        session.entries.clear()
        assert len(session.entries) == 1

    def test_loads_existing(self, store, sample_entries):
        store.save(sample_entries)
        session = JournalSession(store, EntryEnricher())
        assert [e.id for e in session.entries] == [e.id for e in sample_entries]
        assert session.timestamps() == [e.created_at for e in sample_entries]


class TestEnrich:
    @pytest.mark.asyncio
    async def test_submit_offline(self, session, store, now):
        entry, fields = await session.submit("Grateful for a good run this morning", now=now)

        assert fields.fallback_used is True
        assert entry.sentiment == Sentiment.POSITIVE
        assert entry.themes == ["gratitude"]
        assert entry.insight_note.startswith("This entry shows positive")
        assert 1 <= entry.emotional_intensity <= 10
        assert entry.created_at == now
        assert store.load()[0].sentiment == Sentiment.POSITIVE

    @pytest.mark.asyncio
    async def test_submit_blank(self, session):
        assert await session.submit("  ") == (None, None)

    @pytest.mark.asyncio
    async def test_identity_fields_untouched(self, session, now):
        placeholder = session.add("work was fine", now=now)
        await session.enrich_entry(placeholder.id)
        enriched = session.get(placeholder.id)

        assert (enriched.id, enriched.text, enriched.created_at) == (
            placeholder.id,
            placeholder.text,
            placeholder.created_at,
        )
        assert enriched.themes == ["work"]

    @pytest.mark.asyncio
    async def test_unknown_id(self, session):
        assert await session.enrich_entry("missing") is None

    @pytest.mark.asyncio
    async def test_remote_failure_still_enriches(self, store, now):
        analyzer = MagicMock()
        analyzer.analyze = AsyncMock(side_effect=AnalysisError("offline"))
        session = JournalSession(store, EntryEnricher(analyzer))

        entry, fields = await session.submit("so anxious and worried today", now=now)

        assert fields.fallback_used is True
        assert entry.sentiment == Sentiment.NEGATIVE

    @pytest.mark.asyncio
    async def test_concurrent_enrichments_do_not_block(self, store, now):
        release = asyncio.Event()

        async def slow_enrich(text, now=None):
            if text == "slow":
                await release.wait()
            return EnrichedFields(
                sentiment=Sentiment.POSITIVE,
                themes=[text],
                insight_note="ok",
                word_count=1,
                intensity=3,
                key_topics=[text],
            )

        enricher = MagicMock()
        enricher.enrich = slow_enrich
        session = JournalSession(store, enricher)
        slow = session.add("slow", now=now)
        fast = session.add("fast", now=now)

        slow_task = asyncio.create_task(session.enrich_entry(slow.id))
        await asyncio.sleep(0)
        await session.enrich_entry(fast.id)
        assert session.get(fast.id).themes == ["fast"]
        assert session.get(slow.id).themes == []

        release.set()
        await slow_task
        assert session.get(slow.id).themes == ["slow"]
        assert [e.id for e in store.load()] == [fast.id, slow.id]

    @pytest.mark.asyncio
    async def test_last_write_wins(self, store, now):
        release_first = asyncio.Event()
        calls = {"n": 0}

        async def racing_enrich(text, now=None):
            calls["n"] += 1
            label = "first" if calls["n"] == 1 else "second"
            if label == "first":
                await release_first.wait()
            return EnrichedFields(
                sentiment=Sentiment.NEUTRAL,
                themes=[label],
                insight_note=label,
                word_count=1,
                intensity=1,
            )

        enricher = MagicMock()
        enricher.enrich = racing_enrich
        session = JournalSession(store, enricher)
        entry = session.add("same entry", now=now)

        first = asyncio.create_task(session.enrich_entry(entry.id))
        await asyncio.sleep(0)
        await session.enrich_entry(entry.id)
        release_first.set()
        await first

        assert session.get(entry.id).themes == ["first"]
