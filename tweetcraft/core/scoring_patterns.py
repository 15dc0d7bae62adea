"""
Static pattern tables for the viral scorer.

Every entry is matched as a plain substring of the lowercased tweet, so
trailing spaces are significant ("i " must not match "it"). The tables are
tuples and are never mutated at runtime.
"""

# ============================================================
# VOICE
# ============================================================

PERSONAL = ("i ", "my ", "me ", "myself", "i've", "i'm", "i'll", "i'd")

COLLECTIVE = ("we ", "our ", "us ", "ourselves", "we've", "we're", "we'll")

CONVERSATIONAL = (
    "think", "feel", "believe", "wonder", "notice", "realize", "learned",
    "found", "honestly", "personally", "actually", "really", "pretty",
    "quite", "seem", "tend",
)

AUTHENTIC_EMOTION = (
    "struggled", "failed", "mistake", "wrong", "confused", "surprised",
    "grateful", "proud", "disappointed", "excited", "frustrated",
)

# ============================================================
# PENALISED LANGUAGE
# ============================================================

AI_TYPICAL = (
    "delve into", "leverage", "utilize", "furthermore", "in conclusion",
    "moreover", "comprehensive", "holistic", "seamless", "robust",
    "endeavor", "facilitate", "optimize", "streamline",
)

CORPORATE = (
    "best practices", "value proposition", "stakeholders", "ecosystem",
    "end-to-end", "cutting-edge", "state-of-the-art", "synergy",
    "paradigm shift", "actionable insights",
)

PROMOTIONAL = (
    "amazing", "incredible", "revolutionary", "perfect", "guarantee",
    "secret", "exclusive", "breakthrough", "game-changing", "life-changing",
)

SELF_PROMOTION = ("follow me", "subscribe")

CLICHES = (
    "game changer", "think outside the box", "low hanging fruit",
    "circle back", "at the end of the day", "it is what it is",
    "paradigm shift",
)

# ============================================================
# ENGAGEMENT
# ============================================================

ENGAGEMENT_PHRASES = (
    "what do you think", "agree or disagree", "thoughts?", "let me know",
    "share your", "tell me", "anyone else", "am i the only one",
)

RELATABLE = (
    "anyone else", "we all", "everyone knows", "most people",
    "pretty much everyone", "i'm not the only one",
)

OPINION_TRIGGERS = (
    "think", "believe", "disagree", "unpopular opinion", "hot take",
    "controversial",
)

VALUE_WORDS = (
    "tip", "hack", "learned", "discovered", "found", "works", "helps",
    "useful", "lesson", "insight",
)

STORYTELLING = (
    "yesterday", "today", "last week", "just happened", "story time",
    "experience", "journey", "when i", "back when",
)

EMOTION = (
    "love", "hate", "excited", "frustrated", "shocked", "amazed",
    "thrilled", "devastated", "proud", "grateful",
)

# ============================================================
# QUALITY
# ============================================================

# Matched against whole lowercased tokens, not substrings.
STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "of", "to", "in", "for", "with",
    "on", "at", "by", "is", "are", "was", "were", "be", "been", "have",
    "has", "had", "do", "does", "did", "will", "would", "could", "should",
})

SPECIFIC_WORDS = (
    "exactly", "specifically", "precisely", "literally", "actually",
    "concrete", "measurable", "proven", "data", "research", "study",
)

VAGUE_WORDS = (
    "stuff", "things", "whatever", "somehow", "kinda", "sorta", "like",
    "totally", "basically",
)

PUNCTUATION_TYPES = (".", "!", "?", ",", ":")

# ============================================================
# INSIGHT CATEGORISATION
# ============================================================

# An insight is a strength when its text contains one of these markers,
# an improvement when it contains one of the negative markers, and is
# dropped from both lists otherwise. Matching is case-sensitive.
STRENGTH_MARKERS = (
    "excellent", "strong", "good", "natural", "optimal", "authentic",
    "high-value", "builds", "creates", "enhances", "drives",
)

IMPROVEMENT_MARKERS = ("reduce", "may", "too", "lacks", "overly", "excessive")
