"""
Training examples — up to ten of the user's own tweets used to match
their voice in generation prompts.
"""
from datetime import datetime
from typing import Iterable, List

from sqlalchemy.orm import Session

from tweetcraft.core.config import MAX_TRAINING_EXAMPLES
from tweetcraft.models import TrainingExample
from tweetcraft.services.errors import TrainingLimitReached


def list_training_examples(db: Session, user_id: str) -> List[TrainingExample]:
    return (
        db.query(TrainingExample)
        .filter(TrainingExample.user_id == user_id)
        .order_by(TrainingExample.created_at.asc())
        .all()
    )


def training_texts(db: Session, user_id: str) -> List[str]:
    return [example.tweet_text for example in list_training_examples(db, user_id)]


def free_slots(db: Session, user_id: str) -> int:
    used = db.query(TrainingExample).filter(TrainingExample.user_id == user_id).count()
    return max(0, MAX_TRAINING_EXAMPLES - used)


def add_training_examples(db: Session, user_id: str, texts: Iterable[str]) -> List[TrainingExample]:
    """
    Add examples, refusing the whole batch if it would exceed the limit.
    Blank texts are ignored.
    """
    texts = [text.strip() for text in texts if text and text.strip()]
    available = free_slots(db, user_id)
    if len(texts) > available:
        raise TrainingLimitReached(
            f"Only {available} of {MAX_TRAINING_EXAMPLES} training slots left, got {len(texts)} examples"
        )

    rows = []
    for text in texts:
        row = TrainingExample(user_id=user_id, tweet_text=text, created_at=datetime.utcnow())
        db.add(row)
        rows.append(row)
    db.flush()
    return rows
