"""Tests for context-aware writing prompts."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from journal.analysis import AnalysisError
from journal.prompts import (
    CALM_PROMPT,
    DEFAULT_PROMPT_CONTEXT,
    DEFAULT_PROMPT_TEXT,
    FAMILY_PROMPT,
    GROWTH_PROMPT,
    POSITIVE_PROMPT,
    STARTER_PROMPTS,
    WORK_BALANCE_PROMPT,
    build_prompt_request,
    generate_prompts,
    repair_prompts,
    suggest_prompts,
)
from observability import metrics
from shared_types import PromptCategory


def test_no_entries_gets_starters():
    assert suggest_prompts([]) == list(STARTER_PROMPTS)


def test_growth_prompt_always_last(make_entry):
    prompts = suggest_prompts([make_entry(sentiment="neutral", themes=["reflection"])])
    assert prompts == [GROWTH_PROMPT]


def test_all_rules(make_entry):
    entries = [
        make_entry(sentiment="negative", themes=["work"]),
        make_entry(sentiment="positive", themes=["family"]),
    ]
    assert suggest_prompts(entries) == [
        CALM_PROMPT,
        WORK_BALANCE_PROMPT,
        FAMILY_PROMPT,
        POSITIVE_PROMPT,
        GROWTH_PROMPT,
    ]


def test_stress_theme_triggers_calm(make_entry):
    prompts = suggest_prompts([make_entry(sentiment="mixed", themes=["stress"])])
    assert prompts[0] == CALM_PROMPT


def test_only_three_most_recent_considered(make_entry):
    entries = [make_entry(sentiment="neutral") for _ in range(3)]
    entries.append(make_entry(sentiment="negative", themes=["work", "family"]))
    assert suggest_prompts(entries) == [GROWTH_PROMPT]


def _stub_analyzer(reply=None, error=None):
    analyzer = MagicMock()
    analyzer.request_json = AsyncMock(return_value=reply, side_effect=error)
    return analyzer


class TestBuildPromptRequest:
    def test_new_user(self):
        request = build_prompt_request([])
        assert "new user starting their journaling journey" in request
        assert "Recent entries include" not in request

    def test_goals_and_excerpts(self, sample_entries):
        request = build_prompt_request(sample_entries, goals=["sleep earlier", "run a 10k"])
        assert "themes: work, family, stress, work, stress, health" in request
        assert "The user has stated goals: sleep earlier, run a 10k." in request
        assert '"Great day at work, the launch went well and I feel happy..."' in request

    def test_no_goals_line_when_empty(self, sample_entries):
        assert "stated goals" not in build_prompt_request(sample_entries, goals=[])


class TestRepairPrompts:
    def test_caps_at_six_and_fills_defaults(self):
        raw = [{"id": f"p{i}", "text": f"Question {i}?", "category": "growth", "context": "c"} for i in range(8)]
        raw[1] = {"category": "astrology"}
        prompts = repair_prompts({"prompts": raw})

        assert len(prompts) == 6
        assert prompts[0].category == PromptCategory.GROWTH
        assert prompts[1].id == "generated-1"
        assert prompts[1].text == DEFAULT_PROMPT_TEXT
        assert prompts[1].category == PromptCategory.REFLECTION
        assert prompts[1].context == DEFAULT_PROMPT_CONTEXT

    @pytest.mark.parametrize("payload", [{}, {"prompts": []}, {"prompts": "write more"}])
    def test_nothing_usable(self, payload):
        with pytest.raises(AnalysisError):
            repair_prompts(payload)


class TestGeneratePrompts:
    @pytest.mark.asyncio
    async def test_remote_with_goals(self, sample_entries):
        reply = {"prompts": [{"id": "g1", "text": "What helped you rest?", "category": "health", "context": "Sleep goal"}]}
        analyzer = _stub_analyzer(reply)

        prompts, fallback_used = await generate_prompts(sample_entries, analyzer, goals=["sleep earlier"])

        assert fallback_used is False
        assert [p.id for p in prompts] == ["g1"]
        assert prompts[0].category == PromptCategory.HEALTH
        assert "sleep earlier" in analyzer.request_json.await_args.args[0]
        assert metrics.count("prompts.remote") == 1

    @pytest.mark.asyncio
    async def test_new_user_still_asks_model(self):
        analyzer = _stub_analyzer({"prompts": [{"text": "Where are you starting from?"}]})

        prompts, fallback_used = await generate_prompts([], analyzer)

        assert fallback_used is False
        assert prompts[0].text == "Where are you starting from?"
        analyzer.request_json.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_falls_back_on_analysis_error(self, sample_entries):
        analyzer = _stub_analyzer(error=AnalysisError("quota"))

        prompts, fallback_used = await generate_prompts(sample_entries, analyzer)

        assert fallback_used is True
        assert prompts == suggest_prompts(sample_entries)
        assert metrics.count("prompts.fallback") == 1

    @pytest.mark.asyncio
    async def test_falls_back_on_empty_list(self):
        prompts, fallback_used = await generate_prompts([], _stub_analyzer({"prompts": []}))
        assert fallback_used is True
        assert prompts == list(STARTER_PROMPTS)

    @pytest.mark.asyncio
    async def test_no_analyzer(self):
        prompts, fallback_used = await generate_prompts([])
        assert (prompts, fallback_used) == (list(STARTER_PROMPTS), True)
