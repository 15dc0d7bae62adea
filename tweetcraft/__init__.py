"""TweetCraft — voice-matched tweet drafting with viral-potential scoring."""

__version__ = "1.0.0"
