"""
Tweet API routes — generation and the kanban board.

Endpoints:
- POST   /api/tweets/generate                 Idea -> scored drafts (optionally saved)
- POST   /api/tweets/generate-from-insights   One scored tweet per insight
- POST   /api/tweets                          Save drafts (re-scored server-side)
- GET    /api/tweets                          List saved tweets (?status=)
- PATCH  /api/tweets/{id}/status              Move across the board
- PATCH  /api/tweets/{id}/content             Edit and re-score
- POST   /api/tweets/{id}/schedule            Schedule (default +1h) and approve
- DELETE /api/tweets/{id}                     Delete
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from tweetcraft.api.auth.middleware import get_current_user
from tweetcraft.api.schemas import ScoringContextPayload
from tweetcraft.core.constants import IdeaType, InsightType, TweetStatus
from tweetcraft.core.scoring_context import ScoringContext
from tweetcraft.core.viral_scorer import score_tweet_viral_potential
from tweetcraft.db_connection import get_db
from tweetcraft.models import Insight
from tweetcraft.services.content.generator import InsightSource, TweetGenerator, get_tweet_generator
from tweetcraft.services.errors import InvalidStatusTransition, NotFoundError
from tweetcraft.services.logging.service import get_logging_service
from tweetcraft.services.training.examples import training_texts
from tweetcraft.services.tweets import board
from tweetcraft.services.users import ensure_user_exists

router = APIRouter(prefix="/api/tweets", tags=["tweets"])


def get_generator() -> TweetGenerator:
    return get_tweet_generator()


# Pydantic models
class GenerateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    idea: str = Field(..., min_length=1, max_length=5000)
    idea_type: IdeaType = Field(IdeaType.TEXT, alias="ideaType")
    tone: Optional[str] = Field(None, max_length=50)
    style: Optional[str] = Field(None, max_length=200)
    target_audience: Optional[str] = Field(None, alias="targetAudience", max_length=255)
    content_mode: Optional[str] = Field(None, alias="contentMode")
    regeneration_feedback: Optional[str] = Field(None, alias="regenerationFeedback", max_length=1000)
    count: int = Field(3, ge=1, le=5)
    save: bool = False


class InsightPayload(BaseModel):
    id: Optional[str] = None
    content: str = Field(..., min_length=1, max_length=1000)
    insight_type: str = InsightType.KEY_POINT.value
    speaker_attribution: Optional[str] = None


class GenerateFromInsightsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    insights: List[InsightPayload] = Field(..., max_length=10)
    tone: Optional[str] = Field(None, max_length=50)
    target_audience: Optional[str] = Field(None, alias="targetAudience", max_length=255)
    content_mode: Optional[str] = Field(None, alias="contentMode")
    save: bool = False


class DraftPayload(BaseModel):
    content: str = Field(..., min_length=1, max_length=1000)


class SaveTweetsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tweets: List[DraftPayload] = Field(..., min_length=1, max_length=20)
    idea_id: Optional[str] = Field(None, alias="ideaId")
    context: Optional[ScoringContextPayload] = None


class StatusUpdateRequest(BaseModel):
    status: TweetStatus


class ContentUpdateRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=1000)
    context: Optional[ScoringContextPayload] = None


class ScheduleRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    scheduled_time: Optional[datetime] = Field(None, alias="scheduledTime")


def _context(user_id: str, db: Session, content_mode, target_audience, tone) -> ScoringContext:
    return ScoringContext(
        content_mode=content_mode,
        target_audience=target_audience or None,
        tone=tone or None,
        training_examples=tuple(training_texts(db, user_id)),
    )


# ============================================================
# GENERATION
# ============================================================

@router.post("/generate")
def generate_tweets(
    request: GenerateRequest,
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
    generator: TweetGenerator = Depends(get_generator),
):
    """Generate, score and rank drafts for an idea using the user's voice examples."""
    user_id = user["id"]
    ensure_user_exists(db, user_id, user.get("email"))
    ctx = _context(user_id, db, request.content_mode, request.target_audience, request.tone)

    result = generator.generate(
        request.idea,
        ctx,
        regeneration_feedback=request.regeneration_feedback,
        style=request.style,
        count=request.count,
    )
    response = result.to_dict()

    if request.save:
        idea = board.save_idea(db, user_id, request.idea, request.idea_type.value)
        saved = board.save_tweets(db, user_id, result.tweets, idea_id=idea.id)
        db.commit()
        response["idea"] = idea.to_dict()
        response["savedTweets"] = [tweet.to_dict() for tweet in saved]
        get_logging_service().log_user_action("save_generated_tweets", {"count": len(saved)}, user_id=user_id)
    else:
        db.commit()

    return response


@router.post("/generate-from-insights")
def generate_from_insights(
    request: GenerateFromInsightsRequest,
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
    generator: TweetGenerator = Depends(get_generator),
):
    """Turn each extracted insight into one scored tweet, keeping input order."""
    if not request.insights:
        raise HTTPException(status_code=400, detail="No insights provided for tweet generation")

    user_id = user["id"]
    ensure_user_exists(db, user_id, user.get("email"))
    ctx = _context(user_id, db, request.content_mode, request.target_audience, request.tone)

    results = generator.generate_from_insights(
        [
            InsightSource(
                id=insight.id,
                content=insight.content,
                insight_type=insight.insight_type,
                speaker_attribution=insight.speaker_attribution,
            )
            for insight in request.insights
        ],
        ctx,
    )
    response = {
        "tweets": [result.to_dict() for result in results],
        "totalGenerated": len(results),
        "scoringEnabled": True,
    }

    if request.save:
        # Only link insights the user actually owns
        ids = [result.insight_id for result in results if result.insight_id]
        owned = {
            row.id for row in
            db.query(Insight.id).filter(Insight.user_id == user_id, Insight.id.in_(ids)).all()
        } if ids else set()
        saved = []
        for result in results:
            insight_id = result.insight_id if result.insight_id in owned else None
            saved.extend(board.save_tweets(db, user_id, [result.tweet], insight_id=insight_id))
        response["savedTweets"] = [tweet.to_dict() for tweet in saved]

    db.commit()
    return response


# ============================================================
# BOARD
# ============================================================

@router.post("")
def save_tweets(
    request: SaveTweetsRequest,
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Save drafts to the board. Scores are recomputed, never taken from the client."""
    user_id = user["id"]
    ensure_user_exists(db, user_id, user.get("email"))
    ctx = request.context.to_context() if request.context else None

    scored = [score_tweet_viral_potential(draft.content, ctx) for draft in request.tweets]
    saved = board.save_tweets(db, user_id, scored, idea_id=request.idea_id)
    db.commit()
    get_logging_service().log_user_action("save_tweets", {"count": len(saved)}, user_id=user_id)
    return {"tweets": [tweet.to_dict() for tweet in saved], "total": len(saved)}


@router.get("")
def list_tweets(
    status: Optional[TweetStatus] = None,
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    tweets = board.list_tweets(db, user["id"], status.value if status else None)
    return {"tweets": [tweet.to_dict() for tweet in tweets], "total": len(tweets)}


@router.patch("/{tweet_id}/status")
def update_status(
    tweet_id: str,
    request: StatusUpdateRequest,
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        tweet = board.move_tweet(db, user["id"], tweet_id, request.status.value)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidStatusTransition as e:
        raise HTTPException(status_code=409, detail=str(e))
    db.commit()
    get_logging_service().log_user_action(
        "move_tweet", {"tweet_id": tweet_id, "status": tweet.status}, user_id=user["id"]
    )
    return tweet.to_dict()


@router.patch("/{tweet_id}/content")
def update_content(
    tweet_id: str,
    request: ContentUpdateRequest,
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ctx = request.context.to_context() if request.context else None
    try:
        tweet = board.update_content(db, user["id"], tweet_id, request.content, ctx)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidStatusTransition as e:
        raise HTTPException(status_code=409, detail=str(e))
    db.commit()
    return tweet.to_dict()


@router.post("/{tweet_id}/schedule")
def schedule_tweet(
    tweet_id: str,
    request: Optional[ScheduleRequest] = None,
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    when = request.scheduled_time if request else None
    try:
        tweet = board.schedule_tweet(db, user["id"], tweet_id, when)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidStatusTransition as e:
        raise HTTPException(status_code=409, detail=str(e))
    db.commit()
    get_logging_service().log_user_action(
        "schedule_tweet", {"tweet_id": tweet_id, "scheduled_time": tweet.to_dict()["scheduled_time"]},
        user_id=user["id"],
    )
    return tweet.to_dict()


@router.delete("/{tweet_id}")
def delete_tweet(
    tweet_id: str,
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        board.delete_tweet(db, user["id"], tweet_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    db.commit()
    return {"deleted": True, "id": tweet_id}
