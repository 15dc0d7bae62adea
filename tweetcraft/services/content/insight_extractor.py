"""
Transcript -> 3-5 tweetable insights.

The LLM returns JSON; invalid entries are dropped. When fewer than three
usable insights survive, the first long sentences of the transcript are
used instead so the wizard always has something to work with.
"""
import re
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from tweetcraft.core.constants import (
    DEFAULT_CONTENT_SUMMARY,
    FALLBACK_SEGMENT_MAX_LENGTH,
    FALLBACK_SEGMENT_MIN_LENGTH,
    InsightType,
    MAX_INSIGHTS,
    MAX_TRANSCRIPT_LENGTH,
    MIN_INSIGHT_LENGTH,
    MIN_INSIGHTS,
    MIN_TRANSCRIPT_LENGTH,
    TranscriptContentType,
)
from tweetcraft.core.prompt_templates import build_extraction_prompt
from tweetcraft.services.content.llm_client import (
    LLMClient,
    LLMError,
    LLMNotConfigured,
    parse_json_response,
)
from tweetcraft.services.logging.service import get_logging_service

logger = logging.getLogger(__name__)

_SENTENCE_SPLIT = re.compile(r"[.!?]+")


class InsightExtractionError(Exception):
    """The LLM could not produce a usable insight list."""


class TranscriptValidationError(ValueError):
    """Transcript is empty, too short or too long."""


@dataclass
class ExtractedInsight:
    content: str
    insight_type: str = InsightType.KEY_POINT.value
    speaker_attribution: Optional[str] = None
    order_index: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": self.content,
            "speaker_attribution": self.speaker_attribution,
            "insight_type": self.insight_type,
            "order_index": self.order_index,
        }


@dataclass
class ExtractionResult:
    insights: List[ExtractedInsight] = field(default_factory=list)
    content_summary: str = DEFAULT_CONTENT_SUMMARY
    used_fallback: bool = False

    @property
    def total_extracted(self) -> int:
        return len(self.insights)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "insights": [insight.to_dict() for insight in self.insights],
            "total_extracted": self.total_extracted,
            "content_summary": self.content_summary,
        }


def validate_transcript(transcript: str) -> None:
    if not transcript or len(transcript.strip()) < MIN_TRANSCRIPT_LENGTH:
        raise TranscriptValidationError(
            f"Transcript must be at least {MIN_TRANSCRIPT_LENGTH} characters long"
        )
    if len(transcript) > MAX_TRANSCRIPT_LENGTH:
        raise TranscriptValidationError(
            f"Transcript must be less than {MAX_TRANSCRIPT_LENGTH:,} characters"
        )


def normalize_content_type(content_type: Optional[str]) -> str:
    try:
        return TranscriptContentType(content_type).value
    except ValueError:
        return TranscriptContentType.GENERAL.value


def _normalize_insight_type(value: Any) -> str:
    try:
        return InsightType(value).value
    except ValueError:
        return InsightType.KEY_POINT.value


def clean_insights(raw_insights: List[Any]) -> List[ExtractedInsight]:
    """Keep entries with real content (> 10 chars), cap at five, renumber."""
    cleaned = []
    for raw in raw_insights:
        if not isinstance(raw, dict):
            continue
        content = raw.get("content")
        if not isinstance(content, str) or len(content.strip()) <= MIN_INSIGHT_LENGTH:
            continue
        cleaned.append(ExtractedInsight(
            content=content.strip(),
            insight_type=_normalize_insight_type(raw.get("insight_type")),
            speaker_attribution=raw.get("speaker_attribution") or None,
            order_index=len(cleaned),
        ))
        if len(cleaned) == MAX_INSIGHTS:
            break
    return cleaned


def fallback_insights(transcript: str) -> List[ExtractedInsight]:
    """First three sentences longer than 50 chars, cut to 200 chars."""
    segments = [s for s in _SENTENCE_SPLIT.split(transcript) if len(s.strip()) > FALLBACK_SEGMENT_MIN_LENGTH]
    insights = []
    for index, segment in enumerate(segments[:MIN_INSIGHTS]):
        segment = segment.strip()
        content = segment[:FALLBACK_SEGMENT_MAX_LENGTH]
        if len(segment) > FALLBACK_SEGMENT_MAX_LENGTH:
            content += "..."
        insights.append(ExtractedInsight(content=content, order_index=index))
    return insights


class InsightExtractor:

    def __init__(self, client: Optional[LLMClient] = None):
        self.client = client or LLMClient()

    def extract(self, transcript: str, content_type: str = TranscriptContentType.GENERAL.value) -> ExtractionResult:
        """
        Extract insights from a transcript.

        Raises:
            TranscriptValidationError: transcript outside 500-50,000 chars
            LLMNotConfigured: no API key
            InsightExtractionError: LLM failed or returned an unusable shape
        """
        validate_transcript(transcript)
        content_type = normalize_content_type(content_type)

        messages = [{"role": "user", "content": build_extraction_prompt(transcript, content_type)}]
        try:
            data = parse_json_response(
                self.client.chat(messages, temperature=0.3, max_tokens=2000, json_mode=True)
            )
        except LLMNotConfigured:
            raise
        except LLMError as e:
            raise InsightExtractionError(f"Failed to extract insights from transcript: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("insights"), list):
            raise InsightExtractionError("Invalid insights format in AI response")

        summary = data.get("content_summary") or DEFAULT_CONTENT_SUMMARY
        insights = clean_insights(data["insights"])
        used_fallback = False
        if len(insights) < MIN_INSIGHTS:
            logger.info("Only %d usable insights, falling back to transcript segments", len(insights))
            insights = fallback_insights(transcript)
            used_fallback = True

        get_logging_service().log_ai_generation(
            f"Extracted {len(insights)} insights from {content_type} transcript",
            details={"characters": len(transcript), "fallback": used_fallback},
        )
        return ExtractionResult(insights=insights, content_summary=summary, used_fallback=used_fallback)
