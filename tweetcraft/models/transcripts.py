"""
Transcript and Insight models.

A transcript (coaching call, interview, webinar, ...) is uploaded once;
3-5 insights are extracted from it and each can be turned into a tweet.
"""
from datetime import datetime
from tweetcraft.core.constants import InsightType, TranscriptContentType, TranscriptStatus
from tweetcraft.models.base import (
    Base, Column, String, DateTime, Text, Integer, ForeignKey, new_id, isoformat,
)


class Transcript(Base):
    __tablename__ = "transcripts"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(100), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    content_type = Column(String(30), default=TranscriptContentType.GENERAL.value, nullable=False)
    character_count = Column(Integer, nullable=False, default=0)
    status = Column(String(20), default=TranscriptStatus.PROCESSING.value, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    def to_dict(self, include_content: bool = False):
        data = {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "content_type": self.content_type,
            "character_count": self.character_count,
            "status": self.status,
            "created_at": isoformat(self.created_at),
        }
        if include_content:
            data["content"] = self.content
        return data


class Insight(Base):
    __tablename__ = "insights"

    id = Column(String(36), primary_key=True, default=new_id)
    transcript_id = Column(String(36), ForeignKey("transcripts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(100), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    speaker_attribution = Column(String(255), nullable=True)
    insight_type = Column(String(30), default=InsightType.KEY_POINT.value, nullable=False)
    order_index = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "transcript_id": self.transcript_id,
            "content": self.content,
            "speaker_attribution": self.speaker_attribution,
            "insight_type": self.insight_type,
            "order_index": self.order_index,
            "created_at": isoformat(self.created_at),
        }
