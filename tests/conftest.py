"""
Shared fixtures: an in-memory SQLite database, a fake chat-completions
client and a TestClient with auth and the database overridden.
"""
import os
import sys

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tweetcraft.models import Base  # noqa: E402
from tweetcraft.services.content.llm_client import LLMError  # noqa: E402

TEST_USER = {"id": "user-1", "email": "writer@example.com", "role": "authenticated"}

_ENV_KEYS = (
    "DEEPSEEK_API_KEY",
    "SUPABASE_URL",
    "SUPABASE_SERVICE_KEY",
    "SUPABASE_JWT_SECRET",
    "TWITTER_BEARER_TOKEN",
    "PERSIST_LOGS",
    "VIRAL_SCORE_THRESHOLD",
    "MAX_REGENERATION_ATTEMPTS",
    "CORS_ORIGINS",
    "DATABASE_URL",
)


class FakeLLMClient:
    """
    Stand-in for LLMClient. Replies come from a list (consumed in order)
    or from a callable that receives the messages. Exceptions in the list
    are raised instead of returned.
    """

    def __init__(self, replies=None, responder=None, configured=True):
        self.replies = list(replies or [])
        self.responder = responder
        self.configured = configured
        self.calls = []

    def chat(self, messages, temperature=0.7, max_tokens=1000, json_mode=False):
        self.calls.append({
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "json_mode": json_mode,
        })
        if self.responder is not None:
            reply = self.responder(messages)
        elif self.replies:
            reply = self.replies.pop(0)
        else:
            raise LLMError("no scripted reply left")
        if isinstance(reply, Exception):
            raise reply
        return reply

    @property
    def prompts(self):
        return [call["messages"][-1]["content"] for call in self.calls]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Every test starts without API keys (demo mode)."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def fake_llm():
    return FakeLLMClient


@pytest.fixture
def client(db_session):
    from fastapi.testclient import TestClient

    from tweetcraft.api.auth.middleware import get_current_user
    from tweetcraft.api.tweets.routes import get_generator
    from tweetcraft.core.config import Settings
    from tweetcraft.db_connection import get_db
    from tweetcraft.main import app
    from tweetcraft.services.content.generator import TweetGenerator

    def override_get_db():
        yield db_session

    async def override_get_current_user():
        return dict(TEST_USER)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_get_current_user
    app.dependency_overrides[get_generator] = lambda: TweetGenerator(settings=Settings())

    # No context manager: startup events (init_db on the real database) stay off
    yield TestClient(app)

    app.dependency_overrides.clear()
