"""
Tests for environment-driven settings, the env status report, the LLM
client and the structured logging service.
Run with: pytest tests/unit/ -v
"""

import logging
import os
import sys
from unittest import mock

import pytest

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../.."))


# ── Settings ──

class TestSettings:

    def test_defaults(self):
        from tweetcraft.core.config import DEFAULT_DATABASE_URL, get_settings

        settings = get_settings()
        assert settings.database_url == DEFAULT_DATABASE_URL
        assert settings.viral_score_threshold == 65
        assert settings.max_regeneration_attempts == 3
        assert not settings.llm_configured
        assert not settings.persist_logs
        assert settings.cors_origins == []

    def test_reads_environment_at_call_time(self, monkeypatch):
        from tweetcraft.core.config import get_settings

        monkeypatch.setenv("DEEPSEEK_API_KEY", "sk-test")
        monkeypatch.setenv("VIRAL_SCORE_THRESHOLD", "70")
        monkeypatch.setenv("PERSIST_LOGS", "yes")
        monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000, https://app.example.com,")

        settings = get_settings()
        assert settings.llm_configured
        assert settings.viral_score_threshold == 70
        assert settings.persist_logs
        assert settings.cors_origins == ["http://localhost:3000", "https://app.example.com"]

    def test_bad_integer(self, monkeypatch):
        from tweetcraft.core.config import get_settings

        monkeypatch.setenv("MAX_REGENERATION_ATTEMPTS", "three")
        with pytest.raises(ValueError):
            get_settings()


class TestEnvStatus:

    def test_demo_mode_lists_every_missing_key(self):
        from tweetcraft.core.config import get_env_status

        status = get_env_status()
        assert status.demo_mode
        assert status.missing == [
            "DEEPSEEK_API_KEY", "SUPABASE_URL", "SUPABASE_SERVICE_KEY", "TWITTER_BEARER_TOKEN",
        ]
        assert status.message.startswith("⚠️ Demo mode active")

    def test_fully_configured(self):
        from tweetcraft.core.config import Settings, get_env_status

        status = get_env_status(Settings(
            deepseek_api_key="k",
            supabase_url="https://x.supabase.co",
            supabase_service_key="s",
            twitter_bearer_token="t",
        ))
        data = status.to_dict()
        assert data["missing"] == []
        assert data["demoMode"] is False
        assert data["llm"] and data["supabase"] and data["twitter"]
        assert data["message"].startswith("🎉")


# ── LLM client ──

class FakeResponse:
    def __init__(self, status_code, body=None, text=""):
        self.status_code = status_code
        self._body = body
        self.text = text

    def json(self):
        if self._body is None:
            raise ValueError("no json")
        return self._body


class TestLLMClient:

    def _client(self):
        from tweetcraft.core.config import Settings
        from tweetcraft.services.content.llm_client import LLMClient

        return LLMClient(Settings(deepseek_api_key="sk-test"))

    def test_not_configured(self):
        from tweetcraft.core.config import Settings
        from tweetcraft.services.content.llm_client import LLMClient, LLMNotConfigured

        with pytest.raises(LLMNotConfigured):
            LLMClient(Settings()).chat([{"role": "user", "content": "hi"}])

    def test_returns_message_text(self):
        body = {"choices": [{"message": {"content": "  a draft  "}}]}
        with mock.patch("requests.post", return_value=FakeResponse(200, body)) as post:
            assert self._client().chat([{"role": "user", "content": "hi"}], json_mode=True) == "a draft"

        url = post.call_args[0][0]
        payload = post.call_args[1]["json"]
        assert url == "https://api.deepseek.com/v1/chat/completions"
        assert payload["model"] == "deepseek-chat"
        assert payload["response_format"] == {"type": "json_object"}

    def test_http_error(self):
        from tweetcraft.services.content.llm_client import LLMError

        with mock.patch("requests.post", return_value=FakeResponse(500, text="upstream down")):
            with pytest.raises(LLMError):
                self._client().chat([])

    def test_transport_error(self):
        import requests

        from tweetcraft.services.content.llm_client import LLMError

        with mock.patch("requests.post", side_effect=requests.ConnectionError("refused")):
            with pytest.raises(LLMError):
                self._client().chat([])

    def test_malformed_body(self):
        from tweetcraft.services.content.llm_client import LLMError

        with mock.patch("requests.post", return_value=FakeResponse(200, {"choices": []})):
            with pytest.raises(LLMError):
                self._client().chat([])

    def test_parse_json_response_strips_fence(self):
        from tweetcraft.services.content.llm_client import parse_json_response

        assert parse_json_response('```json\n{"a": 1}\n```') == {"a": 1}
        assert parse_json_response('{"b": 2}') == {"b": 2}


# ── Logging service ──

class TestLoggingService:

    def test_events_go_to_python_logging(self, caplog):
        from tweetcraft.services.logging.service import get_logging_service

        with caplog.at_level(logging.INFO, logger="tweetcraft.events"):
            get_logging_service().log_user_action("save_tweets", {"count": 2}, user_id="user-1")
        assert any("User action: save_tweets" in record.getMessage() for record in caplog.records)

    def test_outbound_without_response_is_an_error(self, caplog):
        from tweetcraft.services.logging.service import get_logging_service

        with caplog.at_level(logging.INFO, logger="tweetcraft.events"):
            get_logging_service().log_outbound_request("POST", "https://llm", 0, 12, service_name="llm")
        record = [r for r in caplog.records if "https://llm" in r.getMessage()][-1]
        assert record.levelno == logging.ERROR

    def test_request_context(self):
        from tweetcraft.services.logging.service import (
            clear_request_id,
            get_request_id,
            get_user_id,
            set_request_id,
            set_user_id,
        )

        set_request_id("req-1")
        set_user_id("user-1")
        assert get_request_id() == "req-1"
        assert get_user_id() == "user-1"
        clear_request_id()
        assert get_request_id() is None
        assert get_user_id() is None

    def test_singleton(self):
        from tweetcraft.services.logging.service import get_logging_service

        assert get_logging_service() is get_logging_service()
