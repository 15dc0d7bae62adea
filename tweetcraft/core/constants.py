"""
Application-wide constants for TweetCraft.
"""
from enum import Enum


class TweetStatus(str, Enum):
    """Kanban columns a saved tweet moves through."""
    GENERATED = "generated"
    IN_REVIEW = "in_review"
    APPROVED = "approved"
    PUBLISHED = "published"


# Allowed kanban moves (from -> to)
STATUS_TRANSITIONS = {
    TweetStatus.GENERATED: (TweetStatus.IN_REVIEW, TweetStatus.APPROVED),
    TweetStatus.IN_REVIEW: (TweetStatus.GENERATED, TweetStatus.APPROVED),
    TweetStatus.APPROVED: (TweetStatus.PUBLISHED,),
    TweetStatus.PUBLISHED: (),
}


class TranscriptStatus(str, Enum):
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class IdeaType(str, Enum):
    TEXT = "text"
    VOICE = "voice"
    TRANSCRIPT = "transcript"


class InsightType(str, Enum):
    KEY_POINT = "key_point"
    ACTIONABLE_TIP = "actionable_tip"
    QUOTE = "quote"
    STATISTIC = "statistic"
    LESSON_LEARNED = "lesson_learned"


class TranscriptContentType(str, Enum):
    COACHING_CALL = "coaching_call"
    INTERVIEW = "interview"
    WEBINAR = "webinar"
    MEETING = "meeting"
    PRESENTATION = "presentation"
    GENERAL = "general"


# Tones offered in the idea capture form (demo templates exist for each)
TONES = ("professional", "casual", "humorous", "educational", "inspirational")
DEFAULT_TONE = "professional"

# Transcript size limits (characters)
MIN_TRANSCRIPT_LENGTH = 500
MAX_TRANSCRIPT_LENGTH = 50000

# Insight extraction
MIN_INSIGHTS = 3
MAX_INSIGHTS = 5
MIN_INSIGHT_LENGTH = 10  # stripped content must be longer than this
FALLBACK_SEGMENT_MIN_LENGTH = 50
FALLBACK_SEGMENT_MAX_LENGTH = 200
DEFAULT_CONTENT_SUMMARY = "Key insights extracted from transcript"

# Scheduling offset for "schedule" on the board (hours from now)
DEFAULT_SCHEDULE_OFFSET_HOURS = 1
