"""
Transcript and insight persistence. Functions flush; callers commit.
"""
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from tweetcraft.core.constants import TranscriptStatus
from tweetcraft.models import Insight, Transcript
from tweetcraft.services.content.insight_extractor import (
    ExtractedInsight,
    normalize_content_type,
    validate_transcript,
)
from tweetcraft.services.errors import NotFoundError


def create_transcript(
    db: Session,
    user_id: str,
    title: str,
    content: str,
    content_type: Optional[str] = None,
) -> Transcript:
    """Store a transcript in the 'processing' state."""
    validate_transcript(content)
    transcript = Transcript(
        user_id=user_id,
        title=title,
        content=content,
        content_type=normalize_content_type(content_type),
        character_count=len(content),
        status=TranscriptStatus.PROCESSING.value,
        created_at=datetime.utcnow(),
    )
    db.add(transcript)
    db.flush()
    return transcript


def get_transcript(db: Session, user_id: str, transcript_id: str) -> Transcript:
    transcript = (
        db.query(Transcript)
        .filter(Transcript.id == transcript_id, Transcript.user_id == user_id)
        .first()
    )
    if not transcript:
        raise NotFoundError(f"Transcript {transcript_id} not found")
    return transcript


def update_transcript_status(db: Session, user_id: str, transcript_id: str, status: str) -> Transcript:
    transcript = get_transcript(db, user_id, transcript_id)
    transcript.status = TranscriptStatus(status).value
    db.flush()
    return transcript


def save_insights(
    db: Session,
    user_id: str,
    transcript_id: str,
    insights: Iterable[ExtractedInsight],
) -> List[Insight]:
    """Replace the transcript's insights with the given list."""
    get_transcript(db, user_id, transcript_id)
    db.query(Insight).filter(Insight.transcript_id == transcript_id).delete()

    rows = []
    for index, extracted in enumerate(insights):
        row = Insight(
            transcript_id=transcript_id,
            user_id=user_id,
            content=extracted.content,
            speaker_attribution=extracted.speaker_attribution,
            insight_type=extracted.insight_type,
            order_index=index,
            created_at=datetime.utcnow(),
        )
        db.add(row)
        rows.append(row)
    db.flush()
    return rows


def list_insights(db: Session, user_id: str, transcript_id: str) -> List[Insight]:
    get_transcript(db, user_id, transcript_id)
    return (
        db.query(Insight)
        .filter(Insight.transcript_id == transcript_id)
        .order_by(Insight.order_index.asc())
        .all()
    )
