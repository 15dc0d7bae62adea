"""
Demo drafts used when no LLM key is configured or the LLM call fails.
One template per content mode and tone.
"""
from typing import List, Optional

from tweetcraft.core.constants import DEFAULT_TONE, TONES
from tweetcraft.core.scoring_context import ContentMode, ScoringContext


DEMO_TEMPLATES = {
    ContentMode.THOUGHT_LEADERSHIP: {
        "professional": lambda idea: f"After working in this space: {idea[:180]}... What's your take?",
        "casual": lambda idea: f"Been thinking about this: {idea[:190]}... Anyone else see this?",
        "humorous": lambda idea: f"Hot take: {idea[:200]}... or maybe I'm just overthinking",
        "educational": lambda idea: f"Something I've learned: {idea[:180]}... Worth discussing",
        "inspirational": lambda idea: f"Key insight: {idea[:200]}... Keep pushing forward",
    },
    ContentMode.COMMUNITY_ENGAGEMENT: {
        "professional": lambda idea: f"Question for the community: {idea[:170]}... What's your experience?",
        "casual": lambda idea: f"Curious: {idea[:200]}... How do you all handle this?",
        "humorous": lambda idea: f"{idea[:200]}... or is it just me being weird about this?",
        "educational": lambda idea: f"Poll question: {idea[:180]}... What would you choose?",
        "inspirational": lambda idea: f"Challenge for everyone: {idea[:170]}... Who's in?",
    },
    ContentMode.PERSONAL_BRAND: {
        "professional": lambda idea: f"Personal reflection: {idea[:180]}... Still learning",
        "casual": lambda idea: f"Real talk: {idea[:200]}... Anyone else relate?",
        "humorous": lambda idea: f"Life update: {idea[:180]}... Why is adulting so hard?",
        "educational": lambda idea: f"Lesson learned: {idea[:180]}... Sharing in case it helps",
        "inspirational": lambda idea: f"Growth moment: {idea[:180]}... Grateful for the journey",
    },
    ContentMode.VALUE_FIRST: {
        "professional": lambda idea: f"Pro tip: {idea[:200]}... Hope this helps someone",
        "casual": lambda idea: f"Quick hack: {idea[:200]}... Game changer for me",
        "humorous": lambda idea: f"Life hack: {idea[:180]}... Why didn't I think of this sooner?",
        "educational": lambda idea: f"How to: {idea[:200]}... Step by step breakdown",
        "inspirational": lambda idea: f"Daily reminder: {idea[:180]}... You've got this",
    },
}


def _normalize_tone(tone: Optional[str]) -> str:
    tone = (tone or "").strip().lower()
    return tone if tone in TONES else DEFAULT_TONE


def demo_tweet(idea: str, ctx: ScoringContext) -> str:
    """The single demo draft for the context's mode and tone."""
    return demo_tweets(idea, ctx, count=1)[0]


def demo_tweets(idea: str, ctx: ScoringContext, count: int = 3) -> List[str]:
    """
    Build `count` demo drafts. The requested tone comes first, followed by
    the other tones of the same mode in their fixed order.
    """
    templates = DEMO_TEMPLATES[ctx.content_mode]
    first = _normalize_tone(ctx.tone)
    order = [first] + [tone for tone in TONES if tone != first]

    drafts = []
    for tone in order[:max(1, count)]:
        text = templates[tone](idea)
        if ctx.target_audience:
            text = f"For {ctx.target_audience}: {text}"
        drafts.append(text)
    return drafts
