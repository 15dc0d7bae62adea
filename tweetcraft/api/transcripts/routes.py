"""
Transcript API routes.

Endpoints:
- POST  /api/transcripts                      Store a transcript (processing)
- PATCH /api/transcripts/{id}/status          processing | completed | failed
- POST  /api/transcripts/extract-insights     Transcript -> 3-5 insights
- POST  /api/transcripts/{id}/insights        Save (replace) a transcript's insights
- GET   /api/transcripts/{id}/insights        List a transcript's insights
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from tweetcraft.api.auth.middleware import get_current_user
from tweetcraft.core.constants import InsightType, TranscriptContentType, TranscriptStatus
from tweetcraft.db_connection import get_db
from tweetcraft.services.content.insight_extractor import (
    ExtractedInsight,
    InsightExtractionError,
    InsightExtractor,
    TranscriptValidationError,
)
from tweetcraft.services.content.llm_client import LLMNotConfigured
from tweetcraft.services.errors import NotFoundError
from tweetcraft.services.logging.service import get_logging_service
from tweetcraft.services.transcripts import store
from tweetcraft.services.users import ensure_user_exists

router = APIRouter(prefix="/api/transcripts", tags=["transcripts"])


def get_insight_extractor() -> InsightExtractor:
    return InsightExtractor()


# Pydantic models
class CreateTranscriptRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1, max_length=255)
    content: str
    content_type: TranscriptContentType = Field(TranscriptContentType.GENERAL, alias="contentType")


class TranscriptStatusRequest(BaseModel):
    status: TranscriptStatus


class ExtractInsightsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    transcript: str
    content_type: str = Field(TranscriptContentType.GENERAL.value, alias="contentType")
    transcript_id: Optional[str] = Field(None, alias="transcriptId")


class InsightPayload(BaseModel):
    content: str = Field(..., min_length=1, max_length=1000)
    insight_type: InsightType = InsightType.KEY_POINT
    speaker_attribution: Optional[str] = None


class SaveInsightsRequest(BaseModel):
    insights: List[InsightPayload] = Field(..., max_length=10)


@router.post("")
def create_transcript(
    request: CreateTranscriptRequest,
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ensure_user_exists(db, user["id"], user.get("email"))
    try:
        transcript = store.create_transcript(
            db, user["id"], request.title, request.content, request.content_type.value
        )
    except TranscriptValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    db.commit()
    return transcript.to_dict()


@router.patch("/{transcript_id}/status")
def update_transcript_status(
    transcript_id: str,
    request: TranscriptStatusRequest,
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        transcript = store.update_transcript_status(db, user["id"], transcript_id, request.status.value)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    db.commit()
    return transcript.to_dict()


@router.post("/extract-insights")
def extract_insights(
    request: ExtractInsightsRequest,
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
    extractor: InsightExtractor = Depends(get_insight_extractor),
):
    """
    Extract insights from raw transcript text. When transcriptId is given,
    the insights are saved on that transcript and its status is updated.
    """
    user_id = user["id"]
    transcript = None
    if request.transcript_id:
        try:
            transcript = store.get_transcript(db, user_id, request.transcript_id)
        except NotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))

    try:
        result = extractor.extract(request.transcript, request.content_type)
    except TranscriptValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except LLMNotConfigured:
        raise HTTPException(status_code=503, detail="LLM API key not configured")
    except InsightExtractionError as e:
        get_logging_service().log_error("Insight extraction failed", exception=e, context={"user_id": user_id})
        if transcript is not None:
            transcript.status = TranscriptStatus.FAILED.value
            db.commit()
        raise HTTPException(status_code=502, detail="Failed to extract insights from transcript")

    response = result.to_dict()
    if transcript is not None:
        saved = store.save_insights(db, user_id, transcript.id, result.insights)
        transcript.status = TranscriptStatus.COMPLETED.value
        db.commit()
        response["insights"] = [row.to_dict() for row in saved]
    return response


@router.post("/{transcript_id}/insights")
def save_insights(
    transcript_id: str,
    request: SaveInsightsRequest,
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    extracted = [
        ExtractedInsight(
            content=insight.content.strip(),
            insight_type=insight.insight_type.value,
            speaker_attribution=insight.speaker_attribution or None,
            order_index=index,
        )
        for index, insight in enumerate(request.insights)
    ]
    try:
        rows = store.save_insights(db, user["id"], transcript_id, extracted)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    db.commit()
    return {"insights": [row.to_dict() for row in rows], "total": len(rows)}


@router.get("/{transcript_id}/insights")
def list_insights(
    transcript_id: str,
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        rows = store.list_insights(db, user["id"], transcript_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"insights": [row.to_dict() for row in rows], "total": len(rows)}
