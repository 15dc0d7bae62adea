"""Models package — re-exports all models."""

from tweetcraft.models.base import Base
from tweetcraft.models.auth import User
from tweetcraft.models.tweets import Idea, Tweet
from tweetcraft.models.transcripts import Transcript, Insight
from tweetcraft.models.training import TrainingExample
from tweetcraft.models.logs import LogEntry

__all__ = [
    "Base",
    "User",
    "Idea",
    "Tweet",
    "Transcript",
    "Insight",
    "TrainingExample",
    "LogEntry",
]
