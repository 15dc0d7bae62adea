"""Draft generation, insight extraction and the LLM client."""
from tweetcraft.services.content.generator import TweetGenerator, get_tweet_generator  # noqa: F401
from tweetcraft.services.content.insight_extractor import InsightExtractor  # noqa: F401
from tweetcraft.services.content.llm_client import LLMClient, LLMError, LLMNotConfigured  # noqa: F401
