"""Tests for theme analysis over time."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from journal.analysis import AnalysisError
from journal.themes import (
    analyze_themes,
    build_theme_prompt,
    classify_trend,
    discover_themes,
    growth_rate,
    related_themes,
    repair_theme_analyses,
)
from observability import metrics
from shared_types import Sentiment, ThemeTrend


class TestGrowthRate:
    def test_empty_and_zero(self):
        assert growth_rate([]) == 0.0
        assert growth_rate([0, 0, 0]) == 0.0

    def test_single_bucket(self):
        assert growth_rate([4]) == 0.0

    def test_flat(self):
        assert growth_rate([2, 2, 2]) == pytest.approx(0.0, abs=1e-9)

    def test_normalized_slope(self):
        assert growth_rate([1, 2, 3]) == pytest.approx(0.5)
        assert growth_rate([3, 2, 1]) == pytest.approx(-0.5)


class TestClassifyTrend:
    @pytest.mark.parametrize(
        "rate,expected",
        [
            (0.5, ThemeTrend.INCREASING),
            (0.2, ThemeTrend.STABLE),
            (-0.2, ThemeTrend.STABLE),
            (-0.21, ThemeTrend.DECREASING),
        ],
    )
    def test_threshold(self, rate, expected):
        assert classify_trend(rate) == expected


@pytest.fixture
def history(make_entry):
    return [
        make_entry("A" * 150, days_ago=0, sentiment="positive", themes=["work", "stress"]),
        make_entry("short note", days_ago=1, sentiment="negative", themes=["work"]),
        make_entry("last week", days_ago=8, sentiment="negative", themes=["family", "work"]),
    ]


class TestAnalyzeThemes:
    def test_empty(self):
        assert analyze_themes([]) == []

    def test_ranking_and_frequency(self, history):
        result = analyze_themes(history)
        assert [(t.theme, t.frequency, t.percentage) for t in result] == [
            ("work", 3, 100),
            ("stress", 1, 33),
            ("family", 1, 33),
        ]

    def test_dominant_sentiment_per_theme(self, history):
        by_theme = {t.theme: t for t in analyze_themes(history)}
        assert by_theme["work"].sentiment == Sentiment.NEGATIVE
        assert by_theme["stress"].sentiment == Sentiment.POSITIVE

    def test_examples_truncated(self, history):
        work = analyze_themes(history)[0]
        assert work.examples[0] == "A" * 100 + "..."
        assert work.examples[1] == "short note..."
        assert len(work.examples) == 3

    def test_trends(self, history):
        by_theme = {t.theme: t for t in analyze_themes(history)}
        assert by_theme["work"].trend == ThemeTrend.INCREASING
        assert by_theme["stress"].trend == ThemeTrend.INCREASING
        assert by_theme["family"].trend == ThemeTrend.DECREASING

    def test_single_week_is_stable(self, make_entry):
        entries = [make_entry(themes=["work"]), make_entry(themes=["work"])]
        assert analyze_themes(entries)[0].trend == ThemeTrend.STABLE

    def test_related_themes(self, history):
        by_theme = {t.theme: t for t in analyze_themes(history)}
        assert by_theme["work"].related_themes == ["stress", "family"]
        assert by_theme["family"].related_themes == ["work"]

    def test_limit(self, make_entry):
        entries = [make_entry(themes=[f"t{i}" for i in range(10)])]
        assert len(analyze_themes(entries)) == 8
        assert len(analyze_themes(entries, limit=3)) == 3


def test_related_themes_capped(make_entry):
    entries = [make_entry(themes=["core", "a", "b", "c", "d"])]
    assert related_themes(entries, "core") == ["a", "b", "c"]


class TestRepairThemeAnalyses:
    def test_clamps_fields(self):
        payload = {
            "themes": [
                {
                    "theme": "work",
                    "frequency": "4 entries",
                    "percentage": 140,
                    "sentiment": "negative",
                    "examples": ["a", "b", "c", "d"],
                    "trend": "increasing",
                    "relatedThemes": ["stress", 7, "sleep", "family", "money"],
                },
                {"theme": " ", "frequency": 0, "percentage": -5, "trend": "sideways"},
                "not an object",
            ]
        }
        work, unnamed, junk = repair_theme_analyses(payload)

        assert work.frequency == 4
        assert work.percentage == 100
        assert work.sentiment == Sentiment.NEGATIVE
        assert work.examples == ["a", "b", "c"]
        assert work.trend == ThemeTrend.INCREASING
        assert work.related_themes == ["stress", "sleep", "family"]

        assert unnamed.theme == "theme-1"
        assert unnamed.frequency == 1
        assert unnamed.percentage == 0
        assert unnamed.trend == ThemeTrend.STABLE
        assert junk.theme == "theme-2"
        assert junk.sentiment == Sentiment.NEUTRAL

    def test_at_most_ten(self):
        payload = {"themes": [{"theme": f"t{i}", "frequency": 1} for i in range(15)]}
        assert len(repair_theme_analyses(payload)) == 10
        assert len(repair_theme_analyses(payload, limit=None)) == 10
        assert len(repair_theme_analyses(payload, limit=4)) == 4

    @pytest.mark.parametrize("payload", [{}, {"themes": {"work": 3}}])
    def test_missing_list(self, payload):
        with pytest.raises(AnalysisError):
            repair_theme_analyses(payload)


class TestDiscoverThemes:
    @pytest.mark.asyncio
    async def test_remote(self, sample_entries):
        analyzer = MagicMock()
        analyzer.request_json = AsyncMock(
            return_value={"themes": [{"theme": "resilience", "frequency": 2, "percentage": 66}]}
        )

        results, fallback_used = await discover_themes(sample_entries, analyzer)

        assert fallback_used is False
        assert [t.theme for t in results] == ["resilience"]
        prompt = analyzer.request_json.await_args.args[0]
        assert "written 3 journal entries over the past week" in prompt
        assert metrics.count("themes.remote") == 1

    @pytest.mark.asyncio
    async def test_falls_back_on_analysis_error(self, sample_entries):
        analyzer = MagicMock()
        analyzer.request_json = AsyncMock(side_effect=AnalysisError("timeout"))

        results, fallback_used = await discover_themes(sample_entries, analyzer, limit=2)

        assert fallback_used is True
        assert results == analyze_themes(sample_entries, limit=2)
        assert metrics.count("themes.fallback") == 1

    @pytest.mark.asyncio
    async def test_no_entries_skips_model(self):
        analyzer = MagicMock()
        analyzer.request_json = AsyncMock()

        results, fallback_used = await discover_themes([], analyzer)

        assert (results, fallback_used) == ([], True)
        analyzer.request_json.assert_not_awaited()


def test_theme_prompt_context(sample_entries):
    prompt = build_theme_prompt(sample_entries)
    assert "The most common themes are: work, stress, family, health" in prompt
    assert "Recent entries include themes like: work | family, stress | work, stress" in prompt
    assert '"relatedThemes": ["related1", "related2"]' in prompt
