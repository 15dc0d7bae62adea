"""Request models shared by several routers."""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from tweetcraft.core.scoring_context import ScoringContext


class ScoringContextPayload(BaseModel):
    """Scoring/generation context as sent by the dashboard (camelCase)."""
    model_config = ConfigDict(populate_by_name=True)

    content_mode: Optional[str] = Field(None, alias="contentMode")
    target_audience: Optional[str] = Field(None, alias="targetAudience", max_length=255)
    tone: Optional[str] = Field(None, max_length=50)
    training_examples: List[str] = Field(default_factory=list, alias="trainingExamples", max_length=10)

    def to_context(self) -> ScoringContext:
        # Unknown modes fall back to the default instead of failing validation
        return ScoringContext(
            content_mode=self.content_mode,
            target_audience=self.target_audience or None,
            tone=self.tone or None,
            training_examples=tuple(self.training_examples),
        )
