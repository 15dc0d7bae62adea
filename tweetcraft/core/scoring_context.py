"""
ScoringContext — the per-call context handed to the viral scorer and the
prompt builders.

Only ``content_mode`` influences the scoring math. Audience, tone and
training examples travel with the context because the draft generator
uses them when it builds prompts.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple

logger = logging.getLogger(__name__)


class ContentMode(str, Enum):
    """Content strategies a user can pick for a batch of drafts."""
    THOUGHT_LEADERSHIP = "thoughtLeadership"
    COMMUNITY_ENGAGEMENT = "communityEngagement"
    PERSONAL_BRAND = "personalBrand"
    VALUE_FIRST = "valueFirst"


DEFAULT_CONTENT_MODE = ContentMode.THOUGHT_LEADERSHIP


def resolve_content_mode(value: Any) -> ContentMode:
    """
    Map a raw mode value onto a ContentMode.

    Unknown, empty or missing values fall back to DEFAULT_CONTENT_MODE
    instead of raising, so callers can pass an uninitialised context.
    """
    if isinstance(value, ContentMode):
        return value
    try:
        return ContentMode(value)
    except ValueError:
        if value not in (None, ""):
            logger.debug("Unknown content mode %r, using %s", value, DEFAULT_CONTENT_MODE.value)
        return DEFAULT_CONTENT_MODE


@dataclass(frozen=True)
class ScoringContext:
    content_mode: ContentMode = DEFAULT_CONTENT_MODE
    target_audience: Optional[str] = None
    tone: Optional[str] = None
    training_examples: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "content_mode", resolve_content_mode(self.content_mode))
        object.__setattr__(self, "training_examples", tuple(self.training_examples or ()))

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ScoringContext":
        """Build a context from a request payload (camelCase or snake_case keys)."""
        data = data or {}
        return cls(
            content_mode=data.get("contentMode", data.get("content_mode")),
            target_audience=data.get("targetAudience", data.get("target_audience")),
            tone=data.get("tone"),
            training_examples=data.get("trainingExamples", data.get("training_examples")) or (),
        )

    def with_training_examples(self, examples: Iterable[str]) -> "ScoringContext":
        return ScoringContext(
            content_mode=self.content_mode,
            target_audience=self.target_audience,
            tone=self.tone,
            training_examples=tuple(examples),
        )

    # --- Derived ---

    @property
    def has_training_examples(self) -> bool:
        return len(self.training_examples) > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "contentMode": self.content_mode.value,
            "targetAudience": self.target_audience,
            "tone": self.tone,
            "trainingExamples": list(self.training_examples),
        }
