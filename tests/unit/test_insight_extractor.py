"""
Unit tests for transcript insight extraction.
Run with: pytest tests/unit/ -v
"""

import json
import os
import sys

import pytest

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../.."))

SENTENCES = [
    "The biggest mistake new managers make is trying to be liked instead of being clear",
    "Every one-on-one should start with what the report wants to talk about, not your agenda",
    "We doubled retention once we started writing down every decision and the reason behind it",
    "Feedback lands better when it is specific, timely and tied to an outcome the person cares about",
    "Hiring slowly felt painful at the time but it saved the team from two very expensive mistakes",
    "Most burnout on the team came from unclear priorities rather than from the amount of work",
]
TRANSCRIPT = ". ".join(SENTENCES) + "."


def _insight(content, insight_type="key_point", speaker=None):
    return {"content": content, "insight_type": insight_type, "speaker_attribution": speaker}


def _reply(insights, summary="A call about managing people"):
    return json.dumps({"insights": insights, "total_extracted": len(insights), "content_summary": summary})


class TestValidation:

    def test_transcript_fixture_is_long_enough(self):
        assert 500 <= len(TRANSCRIPT) <= 50000

    def test_too_short(self):
        from tweetcraft.services.content.insight_extractor import TranscriptValidationError, validate_transcript

        with pytest.raises(TranscriptValidationError):
            validate_transcript("x" * 499)

    def test_whitespace_does_not_count(self):
        from tweetcraft.services.content.insight_extractor import TranscriptValidationError, validate_transcript

        with pytest.raises(TranscriptValidationError):
            validate_transcript(" " * 600)

    def test_too_long(self):
        from tweetcraft.services.content.insight_extractor import TranscriptValidationError, validate_transcript

        with pytest.raises(TranscriptValidationError):
            validate_transcript("x" * 50001)

    def test_limits_are_inclusive(self):
        from tweetcraft.services.content.insight_extractor import validate_transcript

        validate_transcript("x" * 500)
        validate_transcript("x" * 50000)

    def test_unknown_content_type_becomes_general(self):
        from tweetcraft.services.content.insight_extractor import normalize_content_type

        assert normalize_content_type("podcast") == "general"
        assert normalize_content_type("interview") == "interview"


class TestCleaning:

    def test_drops_short_and_malformed_entries(self):
        from tweetcraft.services.content.insight_extractor import clean_insights

        cleaned = clean_insights([
            _insight("   tiny    "),
            "not a dict",
            {"insight_type": "quote"},
            _insight("  exactly 11!  "),
            _insight("A real insight worth sharing", "statistic", "Dana"),
        ])
        assert [i.content for i in cleaned] == ["exactly 11!", "A real insight worth sharing"]
        assert [i.order_index for i in cleaned] == [0, 1]
        assert cleaned[1].insight_type == "statistic"
        assert cleaned[1].speaker_attribution == "Dana"

    def test_ten_characters_is_not_enough(self):
        from tweetcraft.services.content.insight_extractor import clean_insights

        assert clean_insights([_insight("0123456789")]) == []

    def test_unknown_type_becomes_key_point(self):
        from tweetcraft.services.content.insight_extractor import clean_insights

        cleaned = clean_insights([_insight("Some decent insight here", "rant")])
        assert cleaned[0].insight_type == "key_point"

    def test_caps_at_five(self):
        from tweetcraft.services.content.insight_extractor import clean_insights

        cleaned = clean_insights([_insight(f"Insight number {i} is useful") for i in range(8)])
        assert len(cleaned) == 5

    def test_fallback_uses_first_three_long_sentences(self):
        from tweetcraft.services.content.insight_extractor import fallback_insights

        insights = fallback_insights("Short one. " + TRANSCRIPT)
        assert [i.content for i in insights] == SENTENCES[:3]
        assert all(i.insight_type == "key_point" for i in insights)

    def test_fallback_truncates_long_sentences(self):
        from tweetcraft.services.content.insight_extractor import fallback_insights

        insights = fallback_insights("word " * 60 + ". " + TRANSCRIPT)
        assert len(insights[0].content) == 203
        assert insights[0].content.endswith("...")


class TestExtractor:

    def _extractor(self, fake_llm, *replies):
        from tweetcraft.services.content.insight_extractor import InsightExtractor

        client = fake_llm(replies=list(replies))
        return InsightExtractor(client=client), client

    def test_happy_path(self, fake_llm):
        extractor, client = self._extractor(fake_llm, _reply([
            _insight(SENTENCES[0], "lesson_learned", "Coach"),
            _insight(SENTENCES[1], "actionable_tip"),
            _insight(SENTENCES[2], "statistic"),
            _insight(SENTENCES[3]),
        ]))
        result = extractor.extract(TRANSCRIPT, "coaching_call")

        assert result.total_extracted == 4
        assert result.content_summary == "A call about managing people"
        assert not result.used_fallback
        assert result.insights[0].speaker_attribution == "Coach"
        assert client.calls[0]["json_mode"] is True
        assert client.calls[0]["temperature"] == 0.3
        assert set(result.to_dict()) == {"insights", "total_extracted", "content_summary"}

    def test_code_fenced_json(self, fake_llm):
        fenced = "```json\n" + _reply([_insight(s) for s in SENTENCES[:3]]) + "\n```"
        extractor, _ = self._extractor(fake_llm, fenced)
        assert extractor.extract(TRANSCRIPT).total_extracted == 3

    def test_too_few_usable_insights_falls_back(self, fake_llm):
        extractor, _ = self._extractor(fake_llm, _reply([_insight(SENTENCES[4]), _insight("short")]))
        result = extractor.extract(TRANSCRIPT)

        assert result.used_fallback
        assert [i.content for i in result.insights] == SENTENCES[:3]

    def test_missing_summary_uses_default(self, fake_llm):
        from tweetcraft.core.constants import DEFAULT_CONTENT_SUMMARY

        extractor, _ = self._extractor(fake_llm, json.dumps({"insights": [_insight(s) for s in SENTENCES[:3]]}))
        assert extractor.extract(TRANSCRIPT).content_summary == DEFAULT_CONTENT_SUMMARY

    def test_invalid_json(self, fake_llm):
        from tweetcraft.services.content.insight_extractor import InsightExtractionError

        extractor, _ = self._extractor(fake_llm, "Here are your insights!")
        with pytest.raises(InsightExtractionError):
            extractor.extract(TRANSCRIPT)

    def test_insights_not_a_list(self, fake_llm):
        from tweetcraft.services.content.insight_extractor import InsightExtractionError

        extractor, _ = self._extractor(fake_llm, json.dumps({"insights": "none"}))
        with pytest.raises(InsightExtractionError):
            extractor.extract(TRANSCRIPT)

    def test_llm_failure_wrapped(self, fake_llm):
        from tweetcraft.services.content.insight_extractor import InsightExtractionError
        from tweetcraft.services.content.llm_client import LLMError

        extractor, _ = self._extractor(fake_llm, LLMError("timeout"))
        with pytest.raises(InsightExtractionError):
            extractor.extract(TRANSCRIPT)

    def test_not_configured_propagates(self):
        from tweetcraft.core.config import Settings
        from tweetcraft.services.content.insight_extractor import InsightExtractor
        from tweetcraft.services.content.llm_client import LLMClient, LLMNotConfigured

        extractor = InsightExtractor(client=LLMClient(Settings()))
        with pytest.raises(LLMNotConfigured):
            extractor.extract(TRANSCRIPT)

    def test_short_transcript_rejected_before_llm_call(self, fake_llm):
        from tweetcraft.services.content.insight_extractor import TranscriptValidationError

        extractor, client = self._extractor(fake_llm)
        with pytest.raises(TranscriptValidationError):
            extractor.extract("too short")
        assert client.calls == []
