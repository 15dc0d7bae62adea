"""
Import a user's best-performing tweets as training examples.

Fetches up to 100 recent original tweets (no retweets, no replies) through
the Twitter v2 API, ranks them by weighted engagement and stores the top
ones in whatever training slots are still free.
"""
import time
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests
from sqlalchemy.orm import Session

from tweetcraft.core.config import MAX_TRAINING_EXAMPLES, Settings, get_settings
from tweetcraft.models import TrainingExample
from tweetcraft.services.errors import NotFoundError, TrainingLimitReached
from tweetcraft.services.logging.service import get_logging_service
from tweetcraft.services.training.examples import add_training_examples, free_slots

logger = logging.getLogger(__name__)

TWITTER_API_BASE = "https://api.twitter.com/2"

# Engagement weights per public metric
ENGAGEMENT_WEIGHTS = {
    "like_count": 1,
    "retweet_count": 3,
    "reply_count": 2,
    "quote_count": 2,
}

TOP_TWEETS = 10


class TwitterAPIError(Exception):
    def __init__(self, message: str, status_code: int = 502, details: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class TwitterNotConfigured(TwitterAPIError):
    def __init__(self):
        super().__init__(
            "Twitter API not configured. Please add TWITTER_BEARER_TOKEN to your environment variables.",
            status_code=503,
        )


@dataclass
class RankedTweet:
    id: str
    text: str
    engagement: int
    metrics: Dict[str, int]

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "text": self.text, "engagement": self.engagement, "metrics": self.metrics}


@dataclass
class ImportResult:
    imported: int
    available_slots: int
    examples: List[TrainingExample]
    top_tweets: List[RankedTweet]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "imported": self.imported,
            "availableSlots": self.available_slots,
            "examples": [example.to_dict() for example in self.examples],
            "topTweets": [tweet.to_dict() for tweet in self.top_tweets],
        }


def engagement_score(metrics: Optional[Dict[str, int]]) -> int:
    metrics = metrics or {}
    return sum(int(metrics.get(name, 0) or 0) * weight for name, weight in ENGAGEMENT_WEIGHTS.items())


def rank_by_engagement(tweets: List[Dict[str, Any]], limit: int = TOP_TWEETS) -> List[RankedTweet]:
    """Highest weighted engagement first; ties keep API order."""
    ranked = [
        RankedTweet(
            id=str(tweet.get("id", "")),
            text=tweet.get("text", ""),
            engagement=engagement_score(tweet.get("public_metrics")),
            metrics=tweet.get("public_metrics") or {},
        )
        for tweet in tweets
        if tweet.get("text")
    ]
    ranked.sort(key=lambda tweet: tweet.engagement, reverse=True)
    return ranked[:limit]


class TwitterClient:

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.bearer_token = settings.twitter_bearer_token

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if not self.bearer_token:
            raise TwitterNotConfigured()

        url = f"{TWITTER_API_BASE}{path}"
        start = time.time()
        try:
            response = requests.get(
                url,
                headers={
                    "Authorization": f"Bearer {self.bearer_token}",
                    "Content-Type": "application/json",
                },
                params=params,
                timeout=30,
            )
        except requests.RequestException as e:
            raise TwitterAPIError(f"Twitter API request failed: {e}") from e

        get_logging_service().log_outbound_request(
            method="GET", url=url, status_code=response.status_code,
            duration_ms=int((time.time() - start) * 1000), service_name="twitter",
            response_body=response.text if response.status_code != 200 else None,
        )

        try:
            body = response.json()
        except ValueError:
            body = {"raw": response.text[:500]}

        if response.status_code != 200:
            raise TwitterAPIError("Twitter API error", status_code=response.status_code, details=body)
        return body

    def get_user_id(self, username: str) -> str:
        body = self._get(f"/users/by/username/{username.lstrip('@')}")
        user_id = (body.get("data") or {}).get("id")
        if not user_id:
            raise NotFoundError("Twitter user not found")
        return user_id

    def get_recent_tweets(self, twitter_user_id: str) -> List[Dict[str, Any]]:
        body = self._get(
            f"/users/{twitter_user_id}/tweets",
            params={
                "max_results": 100,
                "tweet.fields": "public_metrics,created_at",
                "exclude": "retweets,replies",
            },
        )
        return body.get("data") or []


def import_top_tweets(
    db: Session,
    user_id: str,
    twitter_username: str,
    client: Optional[TwitterClient] = None,
) -> ImportResult:
    """
    Import the user's top tweets into their free training slots.

    Raises:
        TwitterNotConfigured / TwitterAPIError: API unavailable or rejected the call
        NotFoundError: unknown username or no tweets
        TrainingLimitReached: all slots already used
    """
    client = client or TwitterClient()

    twitter_user_id = client.get_user_id(twitter_username)
    tweets = client.get_recent_tweets(twitter_user_id)
    if not tweets:
        raise NotFoundError("No tweets found for this user")

    top = rank_by_engagement(tweets)
    available = free_slots(db, user_id)
    to_import = top[:available]
    if not to_import:
        raise TrainingLimitReached(
            f"No available slots for training examples (maximum {MAX_TRAINING_EXAMPLES} allowed)"
        )

    examples = add_training_examples(db, user_id, [tweet.text for tweet in to_import])
    get_logging_service().log_user_action(
        "import_twitter_examples",
        details={"twitter_username": twitter_username, "imported": len(examples)},
        user_id=user_id,
    )
    logger.info("Imported %d tweets from @%s for %s", len(examples), twitter_username, user_id)

    return ImportResult(
        imported=len(examples),
        available_slots=available,
        examples=examples,
        top_tweets=to_import,
    )
