"""Core configuration and the viral scoring engine."""

from tweetcraft.core.scoring_context import ContentMode, ScoringContext, resolve_content_mode  # noqa: F401
from tweetcraft.core.viral_scorer import (  # noqa: F401
    ScoredTweet,
    SubScores,
    TweetInsights,
    ViralScorer,
    get_viral_scorer,
    quick_score,
    rank_tweets_by_viral_potential,
    score_tweet_viral_potential,
)
