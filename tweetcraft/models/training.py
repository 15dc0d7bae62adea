"""
Training examples: the user's own tweets, used for voice matching.
"""
from datetime import datetime
from tweetcraft.models.base import Base, Column, String, DateTime, Text, ForeignKey, new_id, isoformat


class TrainingExample(Base):
    __tablename__ = "training_examples"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(100), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    tweet_text = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "tweet_text": self.tweet_text,
            "created_at": isoformat(self.created_at),
        }
