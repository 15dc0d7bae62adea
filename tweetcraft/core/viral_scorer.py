"""
VIRAL POTENTIAL SCORER

Rates a candidate tweet 0-100 from literal text features. It is a linter
for drafts, not a model: every rule is a fixed delta against a fixed base.

3 Dimensions (each 0-100, weighted into the total):
- Authenticity (40%)           human voice vs. AI/corporate phrasing
- Engagement Prediction (35%)  reply, share and save triggers
- Quality Signals (25%)        readability, density, specificity

Reasoning bands on the total:
- >= 85: Exceptional
- >= 75: High
- >= 65: Good
- >= 55: Moderate
- >= 45: Below average
- <  45: Low
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from tweetcraft.core import scoring_patterns as patterns
from tweetcraft.core.scoring_context import ContentMode, ScoringContext


@dataclass(frozen=True)
class SubScores:
    authenticity: int
    engagement_prediction: int
    quality_signals: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "authenticity": self.authenticity,
            "engagementPrediction": self.engagement_prediction,
            "qualitySignals": self.quality_signals,
        }


@dataclass(frozen=True)
class TweetInsights:
    strengths: Tuple[str, ...]
    improvements: Tuple[str, ...]
    reasoning: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "strengths": list(self.strengths),
            "improvements": list(self.improvements),
            "reasoning": self.reasoning,
        }


@dataclass(frozen=True)
class ScoredTweet:
    """Complete viral-potential assessment for one draft."""
    content: str
    viral_score: int
    scores: SubScores
    insights: TweetInsights

    def meets_threshold(self, threshold: int) -> bool:
        return self.viral_score >= threshold

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase shape used by the API and stored rows."""
        return {
            "content": self.content,
            "viralScore": self.viral_score,
            "scores": self.scores.to_dict(),
            "insights": self.insights.to_dict(),
        }


# Insight texts. The strengths/improvements split is derived from the
# marker words these sentences contain, so wording changes here must keep
# each sentence in its bucket.
INSIGHTS = {
    # authenticity
    "personal_voice": "Personal voice creates authentic connection",
    "collective_voice": "Collective language builds community",
    "conversational_strong": "Strong conversational tone enhances relatability",
    "conversational_some": "Good conversational elements present",
    "authentic_emotion": "Authentic emotional expression builds trust",
    "ai_language": "AI-typical phrasing reduces the human feel",
    "corporate_jargon": "Corporate jargon may feel impersonal",
    "promotional_heavy": "Heavy promotional language reduces credibility",
    "promotional_some": "Moderate promotional tone detected",
    "length_optimal": "Optimal length for authentic engagement",
    "length_good": "Good length for readability",
    "length_brief": "May be too brief for meaningful expression",
    "punctuation_variety": "Natural punctuation variety",
    "excessive_caps": "Excessive capitalization may appear unprofessional",
    # engagement prediction
    "question_and_request": "Strong question format with direct engagement request",
    "direct_question": "Direct question encourages responses",
    "engagement_phrase": "Engagement-focused language present",
    "relatable": "Highly relatable content with universal appeal",
    "opinion": "Opinion-based content sparks discussion",
    "value_high": "High-value content drives saves and shares",
    "value_some": "Provides value to audience",
    "storytelling": "Storytelling elements increase engagement",
    "emotion_strong": "Strong emotional language creates connection",
    "emotion_some": "Emotional elements present",
    "mode_community": "Optimized for community interaction",
    "mode_thought_leadership": "Professional discussion catalyst",
    "mode_personal_brand": "Personal brand building elements",
    "mode_value_first": "Value-first approach optimized",
    "self_promotion": "Self-promotional calls may reduce organic engagement",
    "too_long": "Length may reduce engagement rate",
    "too_brief": "May be too brief for meaningful engagement",
    # quality signals
    "capitalized": "Proper capitalization",
    "readability_excellent": "Excellent readability balance",
    "readability_good": "Good readability",
    "words_too_simple": "Words may be too simple",
    "words_too_complex": "Complex words may reduce accessibility",
    "density_high": "High information density",
    "density_good": "Good content-to-filler ratio",
    "density_low": "May contain too much filler",
    "specific_clear": "Specific, clear communication",
    "specific_mixed": "Generally specific with some vague elements",
    "vague": "Vague language reduces clarity and impact",
    "sentences_varied": "Good sentence structure variety",
    "sentence_single": "Single substantial sentence",
    "cliche": "Clichéd phrases reduce originality",
    "characters_optimal": "Optimal character usage",
    "characters_good": "Good content length",
}

REASONING_BANDS = (
    (85, "Exceptional viral potential with strong performance across all metrics"),
    (75, "High viral potential with excellent fundamentals"),
    (65, "Good viral potential with solid engagement drivers"),
    (55, "Moderate potential with room for optimization"),
    (45, "Below average potential, needs improvement"),
)
LOW_REASONING = "Low viral potential, significant revisions recommended"

_NON_WORD = re.compile(r"[^\w]")
_SENTENCE_SPLIT = re.compile(r"[.!?]+")
# Caps rules look at ASCII letters only
_ASCII_LETTER = re.compile(r"[a-zA-Z]")
_ASCII_UPPER = re.compile(r"[A-Z]")


def _contains_any(text: str, phrases: Iterable[str]) -> bool:
    return any(phrase in text for phrase in phrases)


def _count_matches(text: str, phrases: Iterable[str]) -> int:
    return sum(1 for phrase in phrases if phrase in text)


def _clamp(score: int) -> int:
    return max(0, min(100, score))


def categorize_insight(insight: str) -> Optional[str]:
    """
    Return "strength", "improvement" or None for an insight sentence.

    Markers match case-sensitively, so a capitalised leading word such as
    "Good ..." does not count. Strength markers are checked first, so a
    sentence can never land in both lists.
    """
    if _contains_any(insight, patterns.STRENGTH_MARKERS):
        return "strength"
    if _contains_any(insight, patterns.IMPROVEMENT_MARKERS):
        return "improvement"
    return None


def reasoning_for(viral_score: int) -> str:
    for floor, sentence in REASONING_BANDS:
        if viral_score >= floor:
            return sentence
    return LOW_REASONING


class ViralScorer:
    """
    Viral potential scorer for tweet drafts.
    Pure and stateless: safe to share across threads.
    """

    # Integer percentages so the weighted total rounds halves up exactly.
    WEIGHTS = {
        "authenticity": 40,
        "engagement_prediction": 35,
        "quality_signals": 25,
    }

    def score(self, content: str, ctx: Optional[ScoringContext] = None) -> ScoredTweet:
        """
        Score one draft across all dimensions.

        Args:
            content: Tweet text, passed through unmodified
            ctx: Optional ScoringContext (defaults to thought leadership)

        Returns:
            ScoredTweet with sub-scores and categorised insights
        """
        if ctx is None:
            ctx = ScoringContext()

        authenticity, auth_insights = self.score_authenticity(content, ctx)
        engagement, eng_insights = self.score_engagement_prediction(content, ctx)
        quality, qual_insights = self.score_quality_signals(content, ctx)

        viral_score = self.weighted_total(authenticity, engagement, quality)

        strengths: List[str] = []
        improvements: List[str] = []
        for insight in auth_insights + eng_insights + qual_insights:
            category = categorize_insight(insight)
            if category == "strength":
                strengths.append(insight)
            elif category == "improvement":
                improvements.append(insight)

        return ScoredTweet(
            content=content,
            viral_score=viral_score,
            scores=SubScores(
                authenticity=authenticity,
                engagement_prediction=engagement,
                quality_signals=quality,
            ),
            insights=TweetInsights(
                strengths=tuple(strengths),
                improvements=tuple(improvements),
                reasoning=reasoning_for(viral_score),
            ),
        )

    def rank(self, contents: Iterable[str], ctx: Optional[ScoringContext] = None) -> List[ScoredTweet]:
        """Score every draft and sort by viral score, highest first. Ties keep input order."""
        scored = [self.score(content, ctx) for content in contents]
        scored.sort(key=lambda tweet: tweet.viral_score, reverse=True)
        return scored

    def weighted_total(self, authenticity: int, engagement: int, quality: int) -> int:
        weighted = (
            authenticity * self.WEIGHTS["authenticity"]
            + engagement * self.WEIGHTS["engagement_prediction"]
            + quality * self.WEIGHTS["quality_signals"]
        )
        return (weighted + 50) // 100

    def score_authenticity(self, text: str, ctx: Optional[ScoringContext] = None) -> Tuple[int, List[str]]:
        """
        Score how human-written the draft feels (0-100).
        Base 50, fixed deltas per rule.
        """
        if ctx is None:
            ctx = ScoringContext()
        score = 50
        insights = []
        lowered = text.lower()
        length = len(text)

        # Human voice
        if _contains_any(lowered, patterns.PERSONAL):
            score += 12
            insights.append(INSIGHTS["personal_voice"])
        if (_contains_any(lowered, patterns.COLLECTIVE)
                and ctx.content_mode == ContentMode.COMMUNITY_ENGAGEMENT):
            score += 8
            insights.append(INSIGHTS["collective_voice"])

        conversational = _count_matches(lowered, patterns.CONVERSATIONAL)
        if conversational >= 2:
            score += 10
            insights.append(INSIGHTS["conversational_strong"])
        elif conversational == 1:
            score += 5
            insights.append(INSIGHTS["conversational_some"])

        if _contains_any(lowered, patterns.AUTHENTIC_EMOTION):
            score += 8
            insights.append(INSIGHTS["authentic_emotion"])

        # AI and corporate phrasing
        if _contains_any(lowered, patterns.AI_TYPICAL):
            score -= 15
            insights.append(INSIGHTS["ai_language"])
        if _contains_any(lowered, patterns.CORPORATE):
            score -= 12
            insights.append(INSIGHTS["corporate_jargon"])

        promotional = _count_matches(lowered, patterns.PROMOTIONAL)
        if promotional >= 2:
            score -= 15
            insights.append(INSIGHTS["promotional_heavy"])
        elif promotional == 1:
            score -= 5
            insights.append(INSIGHTS["promotional_some"])

        # Length
        if 60 <= length <= 200:
            score += 10
            insights.append(INSIGHTS["length_optimal"])
        elif 40 <= length <= 280:
            score += 5
            insights.append(INSIGHTS["length_good"])
        elif length < 40:
            score -= 8
            insights.append(INSIGHTS["length_brief"])

        # Punctuation variety
        if _count_matches(text, patterns.PUNCTUATION_TYPES) >= 2:
            score += 8
            insights.append(INSIGHTS["punctuation_variety"])

        # Caps lock
        letters = _ASCII_LETTER.findall(text)
        if letters:
            caps_ratio = len(_ASCII_UPPER.findall(text)) / len(letters)
            if caps_ratio > 0.4:
                score -= 10
                insights.append(INSIGHTS["excessive_caps"])

        return _clamp(score), insights

    def score_engagement_prediction(self, text: str, ctx: Optional[ScoringContext] = None) -> Tuple[int, List[str]]:
        """
        Score the likelihood of replies, shares and saves (0-100).
        Base 40, plus one content-mode bonus.
        """
        if ctx is None:
            ctx = ScoringContext()
        score = 40
        insights = []
        lowered = text.lower()
        length = len(text)

        has_question = "?" in text
        has_engagement_phrase = _contains_any(lowered, patterns.ENGAGEMENT_PHRASES)
        if has_question and has_engagement_phrase:
            score += 25
            insights.append(INSIGHTS["question_and_request"])
        elif has_question:
            score += 15
            insights.append(INSIGHTS["direct_question"])
        elif has_engagement_phrase:
            score += 12
            insights.append(INSIGHTS["engagement_phrase"])

        if _contains_any(lowered, patterns.RELATABLE):
            score += 15
            insights.append(INSIGHTS["relatable"])

        has_opinion = _contains_any(lowered, patterns.OPINION_TRIGGERS)
        if has_opinion:
            score += 12
            insights.append(INSIGHTS["opinion"])

        value_count = _count_matches(lowered, patterns.VALUE_WORDS)
        if value_count >= 2:
            score += 15
            insights.append(INSIGHTS["value_high"])
        elif value_count == 1:
            score += 8
            insights.append(INSIGHTS["value_some"])

        has_story = _contains_any(lowered, patterns.STORYTELLING)
        if has_story:
            score += 10
            insights.append(INSIGHTS["storytelling"])

        emotion_count = _count_matches(lowered, patterns.EMOTION)
        if emotion_count >= 2:
            score += 12
            insights.append(INSIGHTS["emotion_strong"])
        elif emotion_count == 1:
            score += 6
            insights.append(INSIGHTS["emotion_some"])

        # Content-mode bonus, applied at most once
        mode = ctx.content_mode
        if mode == ContentMode.COMMUNITY_ENGAGEMENT:
            if has_question or has_engagement_phrase:
                score += 10
                insights.append(INSIGHTS["mode_community"])
        elif mode == ContentMode.THOUGHT_LEADERSHIP:
            if has_opinion or value_count > 0:
                score += 10
                insights.append(INSIGHTS["mode_thought_leadership"])
        elif mode == ContentMode.PERSONAL_BRAND:
            if _contains_any(lowered, patterns.PERSONAL) or has_story:
                score += 10
                insights.append(INSIGHTS["mode_personal_brand"])
        elif mode == ContentMode.VALUE_FIRST:
            if value_count > 0:
                score += 10
                insights.append(INSIGHTS["mode_value_first"])

        if _contains_any(lowered, patterns.SELF_PROMOTION):
            score -= 8
            insights.append(INSIGHTS["self_promotion"])

        if length > 350:
            score -= 5
            insights.append(INSIGHTS["too_long"])
        elif length < 50:
            score -= 5
            insights.append(INSIGHTS["too_brief"])

        return _clamp(score), insights

    def score_quality_signals(self, text: str, ctx: Optional[ScoringContext] = None) -> Tuple[int, List[str]]:
        """
        Score clarity, density and craft (0-100).
        Base 60. ctx is accepted for symmetry and currently unused.
        """
        score = 60
        insights = []
        lowered = text.lower()
        length = len(text)
        words = text.split()

        if _ASCII_UPPER.match(text):
            score += 5
            insights.append(INSIGHTS["capitalized"])

        # Word-level rules need at least one token
        if words:
            avg_word_length = sum(len(_NON_WORD.sub("", word)) for word in words) / len(words)
            if 3.5 <= avg_word_length <= 6:
                score += 10
                insights.append(INSIGHTS["readability_excellent"])
            elif 3 <= avg_word_length <= 7:
                score += 5
                insights.append(INSIGHTS["readability_good"])
            elif avg_word_length < 3:
                score -= 5
                insights.append(INSIGHTS["words_too_simple"])
            else:
                score -= 8
                insights.append(INSIGHTS["words_too_complex"])

            content_words = [word for word in words if word.lower() not in patterns.STOP_WORDS]
            content_ratio = len(content_words) / len(words)
            if content_ratio >= 0.6:
                score += 10
                insights.append(INSIGHTS["density_high"])
            elif content_ratio >= 0.5:
                score += 5
                insights.append(INSIGHTS["density_good"])
            elif content_ratio < 0.4:
                score -= 5
                insights.append(INSIGHTS["density_low"])

        # Specificity vs vagueness
        has_specific = _contains_any(lowered, patterns.SPECIFIC_WORDS)
        vague_count = _count_matches(lowered, patterns.VAGUE_WORDS)
        if has_specific and vague_count == 0:
            score += 12
            insights.append(INSIGHTS["specific_clear"])
        elif has_specific:
            score += 6
            insights.append(INSIGHTS["specific_mixed"])
        elif vague_count >= 2:
            score -= 8
            insights.append(INSIGHTS["vague"])

        sentences = [s for s in _SENTENCE_SPLIT.split(text) if s.strip()]
        if 2 <= len(sentences) <= 4:
            score += 8
            insights.append(INSIGHTS["sentences_varied"])
        elif len(sentences) == 1 and length > 100:
            score += 3
            insights.append(INSIGHTS["sentence_single"])

        if _contains_any(lowered, patterns.CLICHES):
            score -= 10
            insights.append(INSIGHTS["cliche"])

        if 80 <= length <= 220:
            score += 8
            insights.append(INSIGHTS["characters_optimal"])
        elif 50 <= length <= 280:
            score += 4
            insights.append(INSIGHTS["characters_good"])

        return _clamp(score), insights


# Singleton scorer instance
_scorer: Optional[ViralScorer] = None


def get_viral_scorer() -> ViralScorer:
    """Get or create the viral scorer singleton."""
    global _scorer
    if _scorer is None:
        _scorer = ViralScorer()
    return _scorer


def score_tweet_viral_potential(content: str, ctx: Optional[ScoringContext] = None) -> ScoredTweet:
    return get_viral_scorer().score(content, ctx)


def rank_tweets_by_viral_potential(contents: Iterable[str], ctx: Optional[ScoringContext] = None) -> List[ScoredTweet]:
    return get_viral_scorer().rank(contents, ctx)


def quick_score(content: str) -> int:
    """Quick scoring without detailed breakdown."""
    return score_tweet_viral_potential(content).viral_score
