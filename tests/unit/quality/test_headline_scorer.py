"""
Unit tests for headline scoring.
"""

import json

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from seolens.config import OracleConfig
from seolens.protocols import HeadlineWordCounts
from seolens.quality import HeadlineScorer, compute_headline_score, parse_word_counts
from seolens.quality.headline_scorer import length_bonus

NO_WORDS = HeadlineWordCounts()


class TestComputeHeadlineScore:
    def test_opening_bonus_applied_once(self):
        # Starts with a digit and contains "How": still a single +10.
        assert compute_headline_score("5 Ways How to Improve SEO Today", NO_WORDS) == 40

    def test_category_words(self):
        counts = HeadlineWordCounts(number=1, action=1)

        assert compute_headline_score("5 Ways How to Improve SEO Today", counts) == 60

    def test_how_opening(self):
        assert compute_headline_score("How to write", NO_WORDS) == 20
        assert compute_headline_score("however it goes", NO_WORDS) == 10

    def test_long_headline_penalty(self):
        headline = "An extremely long and detailed headline about search engine optimization tactics"
        assert len(headline) > 70

        assert compute_headline_score(headline, NO_WORDS) == 10

    def test_clamped(self):
        assert compute_headline_score("Ultimate proven secret tips", HeadlineWordCounts(power=20)) == 100

    @pytest.mark.parametrize("words,bonus", [(0, 10), (4, 10), (5, 30), (10, 30), (11, 20)])
    def test_length_bonus(self, words, bonus):
        assert length_bonus(words) == bonus

    @given(
        headline=st.text(max_size=200),
        counts=st.builds(
            HeadlineWordCounts,
            **{
                name: st.integers(min_value=0, max_value=50)
                for name in ("power", "action", "descriptive", "number", "question", "adjective", "emotional")
            },
        ),
    )
    @settings(max_examples=200, deadline=None)
    def test_bounds(self, headline, counts):
        assert 0 <= compute_headline_score(headline, counts) <= 100


class TestParseWordCounts:
    def test_plain_json(self):
        counts = parse_word_counts(json.dumps({"power": 2, "number": 1}))

        assert counts == HeadlineWordCounts(power=2, number=1)
        assert counts.total() == 3

    def test_fenced_reply_with_aliases(self):
        raw = '```json\n{"powerWords": 1, "action_words": 2, "emotional": 1}\n```'

        assert parse_word_counts(raw) == HeadlineWordCounts(power=1, action=2, emotional=1)

    @pytest.mark.parametrize(
        "raw",
        ["", "no json here", "[1, 2, 3]", '{"power": -1}', '{"power": "many"}', "{not json}"],
    )
    def test_invalid(self, raw):
        with pytest.raises(ValueError):
            parse_word_counts(raw)


class TestHeadlineScorer:
    @pytest.mark.asyncio
    async def test_scores_with_oracle_counts(self, fake_oracle):
        scorer = HeadlineScorer(fake_oracle, OracleConfig(headline_temperature=0.0))
        result = await scorer.score("5 Ways How to Improve SEO Today")

        # 5 category words, 7-word bonus, digit opening
        assert result.score == 90
        assert result.degraded is False
        assert result.word_counts.total() == 5
        assert fake_oracle.calls[0]["json_output"] is True
        assert fake_oracle.calls[0]["temperature"] == 0.0
        assert "5 Ways How to Improve SEO Today" in fake_oracle.calls[0]["prompt"]

    @pytest.mark.asyncio
    async def test_oracle_failure_degrades(self, failing_oracle):
        result = await HeadlineScorer(failing_oracle).score("5 Ways How to Improve SEO Today")

        assert result.score == 0
        assert result.degraded is True
        assert result.word_counts is None

    @pytest.mark.asyncio
    async def test_unparseable_reply_degrades(self, make_oracle):
        result = await HeadlineScorer(make_oracle(headline_reply="I cannot help")).score("SEO basics")

        assert result.score == 0
        assert result.degraded is True

    @pytest.mark.asyncio
    async def test_empty_headline_skips_oracle(self, fake_oracle):
        result = await HeadlineScorer(fake_oracle).score("   ")

        assert result.score == 0
        assert result.degraded is True
        assert fake_oracle.calls == []
