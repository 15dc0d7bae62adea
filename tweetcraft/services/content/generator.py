"""
Tweet draft generator.

Flow:
    1. Build the generation prompt (idea, voice examples, mode, tone)
    2. Call the chat-completions endpoint, split drafts on "---"
    3. Score and rank the drafts with the viral scorer
    4. If the best draft is below the threshold, regenerate with feedback
       built from its improvement insights (bounded attempts)
    5. Keep the best-scoring draft set seen across all attempts

Without an API key, or when the first call fails, deterministic demo
drafts are scored and returned instead (is_fallback=True).
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from tweetcraft.core.config import Settings, get_settings
from tweetcraft.core.constants import InsightType
from tweetcraft.core.prompt_templates import (
    SYSTEM_PROMPT,
    build_generation_prompt,
    build_insight_tweet_prompt,
    build_regeneration_feedback,
    parse_drafts,
)
from tweetcraft.core.scoring_context import ScoringContext
from tweetcraft.core.viral_scorer import ScoredTweet, get_viral_scorer
from tweetcraft.services.content.fallback import demo_tweet, demo_tweets
from tweetcraft.services.content.llm_client import LLMClient, LLMError
from tweetcraft.services.logging.service import get_logging_service

logger = logging.getLogger(__name__)

MAX_PARALLEL_INSIGHT_CALLS = 5


@dataclass
class GenerationResult:
    tweets: List[ScoredTweet]
    total_generated: int
    scoring_enabled: bool = True
    regeneration_attempts: int = 0
    final_score: Optional[int] = None
    improved_by_regeneration: bool = False
    is_fallback: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tweets": [tweet.to_dict() for tweet in self.tweets],
            "totalGenerated": self.total_generated,
            "scoringEnabled": self.scoring_enabled,
            "regenerationAttempts": self.regeneration_attempts,
            "finalScore": self.final_score,
            "improvedByRegeneration": self.improved_by_regeneration,
            "isFallback": self.is_fallback,
        }


@dataclass
class InsightSource:
    """An extracted insight to turn into a tweet."""
    id: Optional[str]
    content: str
    insight_type: str = InsightType.KEY_POINT.value
    speaker_attribution: Optional[str] = None


@dataclass
class InsightTweet:
    insight_id: Optional[str]
    tweet: ScoredTweet
    is_fallback: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "insightId": self.insight_id,
            "tweet": self.tweet.to_dict(),
            "isFallback": self.is_fallback,
        }


class TweetGenerator:
    """
    Draft generator with a score-and-regenerate loop.
    """

    def __init__(self, settings: Optional[Settings] = None, client: Optional[LLMClient] = None):
        settings = settings or get_settings()
        self.client = client or LLMClient(settings)
        self.scorer = get_viral_scorer()

        # Configuration
        self.threshold = settings.viral_score_threshold
        self.max_regeneration_attempts = max(0, settings.max_regeneration_attempts)

        # Metrics
        self._generation_stats = {
            "total_requests": 0,
            "successful_first_try": 0,
            "regenerations": 0,
            "fallbacks": 0,
        }

        if not self.client.configured:
            logger.warning("DEEPSEEK_API_KEY not found, generator will return demo drafts")

    # ============================================================
    # IDEA -> DRAFTS
    # ============================================================

    def generate(
        self,
        idea: str,
        ctx: Optional[ScoringContext] = None,
        regeneration_feedback: Optional[str] = None,
        style: Optional[str] = None,
        count: int = 3,
    ) -> GenerationResult:
        """
        Generate, score and rank drafts for an idea.

        Args:
            idea: The raw idea text
            ctx: Scoring context (mode, audience, tone, voice examples)
            regeneration_feedback: Free-text feedback from the user
            style: Optional style hint passed through to the prompt
            count: Drafts requested per LLM call

        Returns:
            GenerationResult with drafts sorted by viral score
        """
        if ctx is None:
            ctx = ScoringContext()
        self._generation_stats["total_requests"] += 1

        if not self.client.configured:
            return self._fallback_result(idea, ctx, count)

        best: Optional[List[ScoredTweet]] = None
        initial_score: Optional[int] = None
        regenerations = 0
        feedback = regeneration_feedback

        for attempt in range(self.max_regeneration_attempts + 1):
            if attempt > 0:
                regenerations += 1
                self._generation_stats["regenerations"] += 1
                retry = build_regeneration_feedback(
                    list(best[0].insights.improvements), best[0].viral_score, self.threshold
                )
                feedback = f"{regeneration_feedback}\n\n{retry}" if regeneration_feedback else retry

            prompt = build_generation_prompt(
                idea, ctx, count=count, regeneration_feedback=feedback, style=style
            )
            try:
                drafts = parse_drafts(self._call_llm(prompt))
            except LLMError as e:
                logger.warning("Draft generation failed on attempt %d: %s", attempt + 1, e)
                drafts = []

            if not drafts:
                if best is None:
                    return self._fallback_result(idea, ctx, count)
                # Keep what we already have
                regenerations -= 1
                break

            ranked = self.scorer.rank(drafts, ctx)
            if best is None:
                initial_score = ranked[0].viral_score
            if best is None or ranked[0].viral_score > best[0].viral_score:
                best = ranked

            if best[0].viral_score >= self.threshold:
                if attempt == 0:
                    self._generation_stats["successful_first_try"] += 1
                break

            logger.info(
                "Best draft scored %d (< %d), attempt %d/%d",
                best[0].viral_score, self.threshold, attempt + 1, self.max_regeneration_attempts + 1,
            )

        final_score = best[0].viral_score
        result = GenerationResult(
            tweets=best,
            total_generated=len(best),
            scoring_enabled=True,
            regeneration_attempts=regenerations,
            final_score=final_score,
            improved_by_regeneration=regenerations > 0 and final_score > initial_score,
        )
        get_logging_service().log_ai_generation(
            f"Generated {result.total_generated} drafts (best {final_score}, {regenerations} regenerations)",
            details={"content_mode": ctx.content_mode.value, "final_score": final_score},
        )
        return result

    # ============================================================
    # INSIGHTS -> TWEETS
    # ============================================================

    def generate_from_insights(
        self,
        insights: List[InsightSource],
        ctx: Optional[ScoringContext] = None,
    ) -> List[InsightTweet]:
        """
        Generate exactly one scored tweet per insight.

        Calls run concurrently; results keep the input order so each tweet
        stays paired with its insight id.
        """
        if not insights:
            raise ValueError("No insights provided for tweet generation")
        if ctx is None:
            ctx = ScoringContext()

        workers = min(len(insights), MAX_PARALLEL_INSIGHT_CALLS)
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(lambda insight: self._tweet_for_insight(insight, ctx), insights))

        # Counted here, after the workers finish, so the stats dict is only
        # touched from the calling thread
        self._generation_stats["fallbacks"] += sum(1 for r in results if r.is_fallback)

        get_logging_service().log_ai_generation(
            f"Generated {len(results)} tweets from insights",
            details={"content_mode": ctx.content_mode.value},
        )
        return results

    def _tweet_for_insight(self, insight: InsightSource, ctx: ScoringContext) -> InsightTweet:
        text = None
        if self.client.configured:
            prompt = build_insight_tweet_prompt(
                insight.content,
                insight_type=insight.insight_type,
                speaker_attribution=insight.speaker_attribution,
                ctx=ctx,
            )
            try:
                drafts = parse_drafts(self._call_llm(prompt, max_tokens=300))
                text = drafts[0] if drafts else None
            except LLMError as e:
                logger.warning("Insight tweet generation failed for %s: %s", insight.id, e)

        if text is None:
            return InsightTweet(
                insight_id=insight.id,
                tweet=self.scorer.score(demo_tweet(insight.content, ctx), ctx),
                is_fallback=True,
            )

        return InsightTweet(insight_id=insight.id, tweet=self.scorer.score(text, ctx))

    # ============================================================
    # HELPERS
    # ============================================================

    def _call_llm(self, prompt: str, max_tokens: int = 1000) -> str:
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]
        return self.client.chat(messages, temperature=0.7, max_tokens=max_tokens)

    def _fallback_result(self, idea: str, ctx: ScoringContext, count: int) -> GenerationResult:
        """Demo drafts, scored with the real engine."""
        self._generation_stats["fallbacks"] += 1
        ranked = self.scorer.rank(demo_tweets(idea, ctx, count), ctx)
        return GenerationResult(
            tweets=ranked,
            total_generated=len(ranked),
            scoring_enabled=True,
            regeneration_attempts=0,
            final_score=ranked[0].viral_score,
            improved_by_regeneration=False,
            is_fallback=True,
        )

    def get_stats(self) -> Dict:
        """Get generation statistics."""
        stats = self._generation_stats.copy()
        total = stats["total_requests"]
        if total > 0:
            stats["first_try_rate"] = round(stats["successful_first_try"] / total * 100, 1)
        return stats


# Singleton generator instance
_generator: Optional[TweetGenerator] = None


def get_tweet_generator() -> TweetGenerator:
    """Get or create the generator singleton."""
    global _generator
    if _generator is None:
        _generator = TweetGenerator()
    return _generator
