"""
Training example API routes.

Endpoints:
- GET  /api/training-examples                  List the user's voice examples
- POST /api/training-examples                  Add examples (max 10 in total)
- POST /api/training-examples/import-twitter   Import top tweets from Twitter
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from tweetcraft.api.auth.middleware import get_current_user
from tweetcraft.core.config import MAX_TRAINING_EXAMPLES
from tweetcraft.db_connection import get_db
from tweetcraft.services.errors import NotFoundError, TrainingLimitReached
from tweetcraft.services.training.examples import add_training_examples, free_slots, list_training_examples
from tweetcraft.services.training.twitter_import import TwitterAPIError, TwitterClient, import_top_tweets
from tweetcraft.services.users import ensure_user_exists

router = APIRouter(prefix="/api/training-examples", tags=["training"])


def get_twitter_client() -> TwitterClient:
    return TwitterClient()


# Pydantic models
class AddExamplesRequest(BaseModel):
    examples: List[str] = Field(..., min_length=1, max_length=MAX_TRAINING_EXAMPLES)


class ImportTwitterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    twitter_username: str = Field(..., min_length=1, max_length=50, alias="twitterUsername")


@router.get("")
def get_training_examples(
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    examples = list_training_examples(db, user["id"])
    return {
        "examples": [example.to_dict() for example in examples],
        "total": len(examples),
        "availableSlots": max(0, MAX_TRAINING_EXAMPLES - len(examples)),
    }


@router.post("")
def add_examples(
    request: AddExamplesRequest,
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user_id = user["id"]
    ensure_user_exists(db, user_id, user.get("email"))
    try:
        rows = add_training_examples(db, user_id, request.examples)
    except TrainingLimitReached as e:
        raise HTTPException(status_code=409, detail=str(e))
    db.commit()
    return {
        "examples": [row.to_dict() for row in rows],
        "total": len(rows),
        "availableSlots": free_slots(db, user_id),
    }


@router.post("/import-twitter")
def import_twitter(
    request: ImportTwitterRequest,
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
    client: TwitterClient = Depends(get_twitter_client),
):
    user_id = user["id"]
    ensure_user_exists(db, user_id, user.get("email"))
    try:
        result = import_top_tweets(db, user_id, request.twitter_username, client=client)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except TrainingLimitReached as e:
        raise HTTPException(status_code=400, detail=str(e))
    except TwitterAPIError as e:
        detail = {"error": str(e), "details": e.details} if e.details else str(e)
        status_code = e.status_code if 400 <= e.status_code < 600 else 502
        raise HTTPException(status_code=status_code, detail=detail)
    db.commit()
    return result.to_dict()
