"""
Viral scoring API routes. Pure computation, no authentication.

Endpoints:
- POST /api/scoring/score   Score one draft
- POST /api/scoring/rank    Score and rank several drafts
"""
from typing import List, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from tweetcraft.api.schemas import ScoringContextPayload
from tweetcraft.core.viral_scorer import rank_tweets_by_viral_potential, score_tweet_viral_potential

router = APIRouter(prefix="/api/scoring", tags=["scoring"])


class ScoreRequest(BaseModel):
    content: str = Field(..., max_length=5000)
    context: Optional[ScoringContextPayload] = None


class RankRequest(BaseModel):
    contents: List[str] = Field(..., max_length=50)
    context: Optional[ScoringContextPayload] = None


@router.post("/score")
def score_tweet(request: ScoreRequest):
    ctx = request.context.to_context() if request.context else None
    return score_tweet_viral_potential(request.content, ctx).to_dict()


@router.post("/rank")
def rank_tweets(request: RankRequest):
    ctx = request.context.to_context() if request.context else None
    ranked = rank_tweets_by_viral_potential(request.contents, ctx)
    return {"tweets": [tweet.to_dict() for tweet in ranked], "total": len(ranked)}
