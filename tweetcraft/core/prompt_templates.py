"""
PROMPT TEMPLATES

Every prompt sent to the chat-completions endpoint is built here.

This module contains:
- SYSTEM_PROMPT: Shared voice rules sent with every request
- build_generation_prompt(): Idea -> N drafts
- build_insight_tweet_prompt(): One extracted insight -> one tweet
- build_extraction_prompt(): Transcript -> 3-5 insights (JSON)
- build_regeneration_feedback(): Turns scorer improvements into retry guidance
- parse_drafts(): Splits a multi-draft completion on "---"
"""

from typing import Dict, List, Optional

from tweetcraft.core.constants import InsightType, TranscriptContentType
from tweetcraft.core.scoring_context import ContentMode, ScoringContext


# ============================================================
# STRATEGY TABLES
# ============================================================

CONTENT_MODE_DESCRIPTIONS: Dict[ContentMode, str] = {
    ContentMode.THOUGHT_LEADERSHIP: "Create authoritative, insightful content that positions the author as a knowledgeable expert in their field.",
    ContentMode.COMMUNITY_ENGAGEMENT: "Create content that fosters discussion and builds genuine connections with the audience.",
    ContentMode.PERSONAL_BRAND: "Create authentic content that showcases the author's personality, journey, and unique perspective.",
    ContentMode.VALUE_FIRST: "Create practical, actionable content that helps the audience solve problems or learn something new.",
}

ENGAGEMENT_HOOKS: Dict[ContentMode, str] = {
    ContentMode.THOUGHT_LEADERSHIP: "Include opinion statements or contrarian views that invite expert discussion",
    ContentMode.COMMUNITY_ENGAGEMENT: "Always include questions or calls-to-action that encourage audience participation",
    ContentMode.PERSONAL_BRAND: "Share personal stories and experiences that build authentic connection",
    ContentMode.VALUE_FIRST: "Provide specific, actionable insights that offer immediate value",
}

INSIGHT_TYPE_GUIDANCE: Dict[InsightType, str] = {
    InsightType.KEY_POINT: "Transform this central idea into a compelling perspective or observation that sparks discussion",
    InsightType.ACTIONABLE_TIP: "Present this advice in a way that feels immediately useful and practical to the audience",
    InsightType.QUOTE: "Reframe this quote to feel like a personal insight or realization rather than just repeating it",
    InsightType.STATISTIC: "Use this data point to support a broader argument or surprising revelation",
    InsightType.LESSON_LEARNED: "Share this lesson as a personal growth moment that others can relate to and learn from",
}

CONTENT_TYPE_FOCUS: Dict[TranscriptContentType, str] = {
    TranscriptContentType.COACHING_CALL: "Focus on personal development insights, breakthrough moments, coaching advice",
    TranscriptContentType.INTERVIEW: "Focus on expert insights, unique perspectives, key revelations",
    TranscriptContentType.WEBINAR: "Focus on educational content, key takeaways, practical applications",
    TranscriptContentType.MEETING: "Focus on decisions made, action items, important discussions",
    TranscriptContentType.PRESENTATION: "Focus on main points, key data, compelling arguments",
    TranscriptContentType.GENERAL: "Focus on the most valuable and shareable insights regardless of format",
}

DRAFT_SEPARATOR = "---"


def _insight_guidance(insight_type: str) -> str:
    try:
        return INSIGHT_TYPE_GUIDANCE[InsightType(insight_type)]
    except ValueError:
        return INSIGHT_TYPE_GUIDANCE[InsightType.KEY_POINT]


def _content_type_focus(content_type: str) -> str:
    try:
        return CONTENT_TYPE_FOCUS[TranscriptContentType(content_type)]
    except ValueError:
        return CONTENT_TYPE_FOCUS[TranscriptContentType.GENERAL]


# ============================================================
# SYSTEM PROMPT
# ============================================================

SYSTEM_PROMPT = """You are an expert social media strategist who writes authentic, high-performing tweets.

VOICE RULES:
- Write like a real human sharing a genuine thought, not a brand
- Use personal voice ("I", "my", "personally") and natural conversational words
- Avoid AI-typical phrases ("leverage", "utilize", "delve into") and corporate jargon
- Prefer specific details (numbers, timeframes, examples) over vague language

TECHNICAL CONSTRAINTS:
- NO emojis, NO hashtags, NO links
- Each tweet under 280 characters
- Perfect grammar and spelling"""


# ============================================================
# IDEA -> DRAFTS
# ============================================================

def format_training_examples(examples: List[str], limit: Optional[int] = None) -> str:
    """Format the user's own tweets for voice matching. Returns empty string if none."""
    if not examples:
        return ""
    selected = list(examples)[:limit] if limit else list(examples)
    lines = ["Please match the tone, style, and structure of these example tweets:"]
    for i, example in enumerate(selected, 1):
        lines.append(f'{i}. "{example}"')
    return "\n".join(lines)


def build_generation_prompt(
    idea: str,
    ctx: ScoringContext = None,
    count: int = 3,
    regeneration_feedback: Optional[str] = None,
    style: Optional[str] = None,
) -> str:
    """
    Build the per-request prompt that turns an idea into `count` drafts.
    Drafts come back separated by DRAFT_SEPARATOR.
    """
    if ctx is None:
        ctx = ScoringContext()

    prompt = f'Generate {count} engaging tweets based on the following idea: "{idea}"'

    prompt += f"""

CONTENT MODE: {ctx.content_mode.value}
{CONTENT_MODE_DESCRIPTIONS[ctx.content_mode]}
ENGAGEMENT HOOKS: {ENGAGEMENT_HOOKS[ctx.content_mode]}"""

    if ctx.target_audience:
        prompt += f"\n\nTARGET AUDIENCE: {ctx.target_audience}"

    if ctx.has_training_examples:
        prompt += "\n\n" + format_training_examples(ctx.training_examples)

    if regeneration_feedback:
        prompt += f"\n\nUser feedback for improvement: {regeneration_feedback}"

    if ctx.tone:
        prompt += f"\n\nTone: {ctx.tone}"

    if style:
        prompt += f"\n\nStyle: {style}"

    prompt += f"""

Requirements:
- Make them engaging and shareable
- Vary the angle slightly between the {count} options
- Return only the tweet text, separated by "{DRAFT_SEPARATOR}\""""

    return prompt


def parse_drafts(text: str) -> List[str]:
    """Split a completion into drafts, dropping empties."""
    if not text:
        return []
    drafts = [part.strip().strip('"').strip() for part in text.split(DRAFT_SEPARATOR)]
    return [draft for draft in drafts if draft]


def build_regeneration_feedback(improvements: List[str], viral_score: int, threshold: int) -> str:
    """
    Build retry guidance from the best draft's improvement insights.
    Used when the best draft scored below the regeneration threshold.
    """
    lines = [f"The best draft scored {viral_score}/100, below the target of {threshold}."]
    if improvements:
        lines.append("Fix these issues:")
        lines.extend(f"- {item}" for item in improvements)
    else:
        lines.append("Make the drafts more personal, specific and conversational.")
    return "\n".join(lines)


# ============================================================
# INSIGHT -> TWEET
# ============================================================

def build_insight_tweet_prompt(
    content: str,
    insight_type: str = InsightType.KEY_POINT.value,
    speaker_attribution: Optional[str] = None,
    ctx: ScoringContext = None,
) -> str:
    """Build the prompt that turns one extracted insight into exactly one tweet."""
    if ctx is None:
        ctx = ScoringContext()

    sections = [
        f"CONTENT MODE: {ctx.content_mode.value.upper()}",
        CONTENT_MODE_DESCRIPTIONS[ctx.content_mode],
        "",
        f'INSIGHT TO TRANSFORM:\n"{content}"',
        "",
        f"INSIGHT TYPE: {insight_type}",
    ]
    if speaker_attribution:
        sections.append(f"ORIGINAL SPEAKER: {speaker_attribution}")
    if ctx.target_audience:
        sections.append(f"TARGET AUDIENCE: {ctx.target_audience}")

    # Only the first three examples; longer prompts dilute the voice
    examples = format_training_examples(ctx.training_examples, limit=3)
    if examples:
        sections.extend(["", "PERSONAL VOICE & STYLE EXAMPLES:", examples])

    sections.extend([
        "",
        f"ENGAGEMENT HOOKS: {ENGAGEMENT_HOOKS[ctx.content_mode]}",
        f"INSIGHT-SPECIFIC OPTIMIZATION: {_insight_guidance(insight_type)}",
        "",
        f"TONE: {ctx.tone or 'professional'}",
        "",
        "Generate exactly ONE tweet that transforms this insight into engaging content.",
        "Don't just repost the insight: add context, personal perspective, or framing that invites replies.",
        "Optimal length: 100-150 characters.",
        "Return ONLY the single tweet with no additional formatting, quotes, or explanations.",
    ])
    return "\n".join(sections)


# ============================================================
# TRANSCRIPT -> INSIGHTS
# ============================================================

def build_extraction_prompt(transcript: str, content_type: str = TranscriptContentType.GENERAL.value) -> str:
    return f"""You are an expert content analyst extracting key insights from {content_type} transcripts for social media content creation.

TRANSCRIPT TO ANALYZE:
"{transcript}"

CONTENT TYPE: {content_type}

YOUR TASK:
Extract exactly 3-5 of the most valuable, tweetable insights from this transcript.

INSIGHT CATEGORIZATION:
- key_point: Main ideas, central themes, important observations
- actionable_tip: Specific advice, how-to guidance, practical steps
- quote: Memorable statements, powerful phrases, quotable moments
- statistic: Numbers, data points, research findings, metrics
- lesson_learned: Personal growth insights, mistakes to avoid, wisdom gained

SPEAKER ATTRIBUTION:
- If multiple speakers are present, identify who said what
- If no clear speaker attribution exists, use null

CONTENT TYPE FOCUS:
- {_content_type_focus(content_type)}

OUTPUT (JSON only):
{{
    "insights": [
        {{
            "content": "The insight text (tweet-ready, 50-200 characters)",
            "speaker_attribution": "Speaker name or null",
            "insight_type": "one of: key_point, actionable_tip, quote, statistic, lesson_learned",
            "order_index": 0
        }}
    ],
    "total_extracted": 0,
    "content_summary": "Brief 1-2 sentence summary of the transcript"
}}

Order insights by importance (most valuable first). Return ONLY the JSON response."""
