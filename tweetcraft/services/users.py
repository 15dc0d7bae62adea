"""
Local user rows, mirrored from Supabase auth on first use.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from tweetcraft.models import User


def ensure_user_exists(db: Session, user_id: str, email: Optional[str] = None) -> User:
    """Get the user row, creating it if it doesn't exist."""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        user = User(
            id=user_id,
            email=email,
            username=email.split("@")[0] if email else None,
            created_at=datetime.utcnow(),
        )
        db.add(user)
        db.flush()
    elif email and not user.email:
        user.email = email
        db.flush()
    return user
