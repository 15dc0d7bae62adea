"""
Idea and Tweet models.

An idea is the raw thought (typed, dictated or taken from a transcript);
tweets are the scored drafts generated from it. Saved tweets move across
the kanban board: generated -> in_review -> approved -> published.
"""
from datetime import datetime
from tweetcraft.core.constants import IdeaType, TweetStatus
from tweetcraft.models.base import (
    Base, Column, String, DateTime, Text, Integer, JSON, ForeignKey, Index, new_id, isoformat,
)


class Idea(Base):
    __tablename__ = "ideas"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(100), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    type = Column(String(20), default=IdeaType.TEXT.value, nullable=False)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "content": self.content,
            "type": self.type,
            "created_at": isoformat(self.created_at),
        }


class Tweet(Base):
    __tablename__ = "tweets"
    __table_args__ = (
        Index("idx_tweets_user_status", "user_id", "status"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(100), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    idea_id = Column(String(36), ForeignKey("ideas.id", ondelete="SET NULL"), nullable=True)
    insight_id = Column(String(36), ForeignKey("insights.id", ondelete="SET NULL"), nullable=True)

    content = Column(Text, nullable=False)
    status = Column(String(20), default=TweetStatus.GENERATED.value, nullable=False)
    scheduled_time = Column(DateTime(timezone=True), nullable=True)

    # Viral scoring snapshot (recomputed whenever content changes)
    viral_score = Column(Integer, nullable=True)
    authenticity_score = Column(Integer, nullable=True)
    engagement_score = Column(Integer, nullable=True)
    quality_score = Column(Integer, nullable=True)
    score_insights = Column(JSON, nullable=True)  # {"strengths": [...], "improvements": [...], "reasoning": "..."}

    # Post-publish metrics, filled in manually or by a future sync
    performance = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def apply_score(self, scored):
        """Copy a ScoredTweet's numbers and insights onto this row."""
        self.viral_score = scored.viral_score
        self.authenticity_score = scored.scores.authenticity
        self.engagement_score = scored.scores.engagement_prediction
        self.quality_score = scored.scores.quality_signals
        self.score_insights = scored.insights.to_dict()

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "idea_id": self.idea_id,
            "insight_id": self.insight_id,
            "content": self.content,
            "status": self.status,
            "scheduled_time": isoformat(self.scheduled_time),
            "viral_score": self.viral_score,
            "scores": {
                "authenticity": self.authenticity_score,
                "engagementPrediction": self.engagement_score,
                "qualitySignals": self.quality_score,
            },
            "insights": self.score_insights or {},
            "performance": self.performance,
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
        }
