"""
User model.

Rows mirror Supabase auth users; they are created lazily the first time
an authenticated user touches the API (see ensure_user_exists).
"""
from datetime import datetime
from tweetcraft.models.base import Base, Column, String, DateTime, isoformat


class User(Base):
    __tablename__ = "users"

    # Supabase auth user id
    id = Column(String(100), primary_key=True)
    email = Column(String(255), nullable=True, index=True)
    username = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "username": self.username,
            "created_at": isoformat(self.created_at),
        }
