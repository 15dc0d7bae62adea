"""
Tweet board — saved drafts and their kanban lifecycle.

Statuses: generated → in_review → approved → published
(in_review can go back to generated; generated can skip straight to approved)

All functions flush but never commit; the caller owns the transaction.
"""
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from tweetcraft.core.constants import (
    DEFAULT_SCHEDULE_OFFSET_HOURS,
    IdeaType,
    STATUS_TRANSITIONS,
    TweetStatus,
)
from tweetcraft.core.scoring_context import ScoringContext
from tweetcraft.core.viral_scorer import ScoredTweet, score_tweet_viral_potential
from tweetcraft.models import Idea, Tweet
from tweetcraft.services.errors import InvalidStatusTransition, NotFoundError


def can_transition(current: str, requested: str) -> bool:
    try:
        return TweetStatus(requested) in STATUS_TRANSITIONS[TweetStatus(current)]
    except ValueError:
        return False


def save_idea(db: Session, user_id: str, content: str, idea_type: str = IdeaType.TEXT.value) -> Idea:
    idea = Idea(user_id=user_id, content=content, type=IdeaType(idea_type).value, created_at=datetime.utcnow())
    db.add(idea)
    db.flush()
    return idea


def save_tweets(
    db: Session,
    user_id: str,
    drafts: Iterable[ScoredTweet],
    idea_id: Optional[str] = None,
    insight_id: Optional[str] = None,
) -> List[Tweet]:
    """Persist scored drafts in the 'generated' column."""
    tweets = []
    for scored in drafts:
        tweet = Tweet(
            user_id=user_id,
            idea_id=idea_id,
            insight_id=insight_id,
            content=scored.content,
            status=TweetStatus.GENERATED.value,
        )
        tweet.apply_score(scored)
        db.add(tweet)
        tweets.append(tweet)
    db.flush()
    return tweets


def list_tweets(db: Session, user_id: str, status: Optional[str] = None) -> List[Tweet]:
    query = db.query(Tweet).filter(Tweet.user_id == user_id)
    if status:
        query = query.filter(Tweet.status == TweetStatus(status).value)
    return query.order_by(Tweet.created_at.desc()).all()


def get_tweet(db: Session, user_id: str, tweet_id: str) -> Tweet:
    tweet = db.query(Tweet).filter(Tweet.id == tweet_id, Tweet.user_id == user_id).first()
    if not tweet:
        raise NotFoundError(f"Tweet {tweet_id} not found")
    return tweet


def move_tweet(db: Session, user_id: str, tweet_id: str, status: str) -> Tweet:
    """Move a tweet to another kanban column."""
    tweet = get_tweet(db, user_id, tweet_id)
    if not can_transition(tweet.status, status):
        raise InvalidStatusTransition(tweet.status, status)
    tweet.status = TweetStatus(status).value
    tweet.updated_at = datetime.utcnow()
    db.flush()
    return tweet


def update_content(
    db: Session,
    user_id: str,
    tweet_id: str,
    content: str,
    ctx: Optional[ScoringContext] = None,
) -> Tweet:
    """Edit a draft's text and re-score it."""
    tweet = get_tweet(db, user_id, tweet_id)
    if tweet.status == TweetStatus.PUBLISHED.value:
        raise InvalidStatusTransition(tweet.status, "edited")
    tweet.content = content
    tweet.apply_score(score_tweet_viral_potential(content, ctx))
    tweet.updated_at = datetime.utcnow()
    db.flush()
    return tweet


def schedule_tweet(
    db: Session,
    user_id: str,
    tweet_id: str,
    when: Optional[datetime] = None,
) -> Tweet:
    """Set the publish time (default: one hour from now) and mark approved."""
    tweet = get_tweet(db, user_id, tweet_id)
    if tweet.status == TweetStatus.PUBLISHED.value:
        raise InvalidStatusTransition(tweet.status, TweetStatus.APPROVED.value)
    tweet.scheduled_time = when or datetime.utcnow() + timedelta(hours=DEFAULT_SCHEDULE_OFFSET_HOURS)
    tweet.status = TweetStatus.APPROVED.value
    tweet.updated_at = datetime.utcnow()
    db.flush()
    return tweet


def delete_tweet(db: Session, user_id: str, tweet_id: str) -> None:
    tweet = get_tweet(db, user_id, tweet_id)
    db.delete(tweet)
    db.flush()
