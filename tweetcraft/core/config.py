"""
Runtime configuration for TweetCraft.
Everything is read from environment variables (a project-root .env is
loaded by main.py before this module is used).
"""
import os
from dataclasses import dataclass, field
from typing import List


DEFAULT_DATABASE_URL = "sqlite:///./tweetcraft.db"
DEFAULT_LLM_BASE_URL = "https://api.deepseek.com/v1"
DEFAULT_LLM_MODEL = "deepseek-chat"

# Training examples kept per user for voice matching
MAX_TRAINING_EXAMPLES = 10


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _env_list(name: str) -> List[str]:
    raw = os.environ.get(name, "")
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class Settings:
    """Snapshot of the environment at the time get_settings() was called."""
    database_url: str = DEFAULT_DATABASE_URL
    supabase_url: str = ""
    supabase_service_key: str = ""
    supabase_jwt_secret: str = ""
    deepseek_api_key: str = ""
    llm_base_url: str = DEFAULT_LLM_BASE_URL
    llm_model: str = DEFAULT_LLM_MODEL
    llm_timeout: int = 60
    viral_score_threshold: int = 65
    max_regeneration_attempts: int = 3
    twitter_bearer_token: str = ""
    cors_origins: List[str] = field(default_factory=list)
    persist_logs: bool = False

    @property
    def llm_configured(self) -> bool:
        return bool(self.deepseek_api_key)

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_service_key)

    @property
    def twitter_configured(self) -> bool:
        return bool(self.twitter_bearer_token)


def get_settings() -> Settings:
    """Read settings from the current environment."""
    return Settings(
        database_url=os.environ.get("DATABASE_URL", "") or DEFAULT_DATABASE_URL,
        supabase_url=os.environ.get("SUPABASE_URL", ""),
        supabase_service_key=os.environ.get("SUPABASE_SERVICE_KEY", ""),
        supabase_jwt_secret=os.environ.get("SUPABASE_JWT_SECRET", ""),
        deepseek_api_key=os.environ.get("DEEPSEEK_API_KEY", ""),
        llm_base_url=(os.environ.get("LLM_BASE_URL", "") or DEFAULT_LLM_BASE_URL).rstrip("/"),
        llm_model=os.environ.get("LLM_MODEL", "") or DEFAULT_LLM_MODEL,
        llm_timeout=_env_int("LLM_TIMEOUT", 60),
        viral_score_threshold=_env_int("VIRAL_SCORE_THRESHOLD", 65),
        max_regeneration_attempts=_env_int("MAX_REGENERATION_ATTEMPTS", 3),
        twitter_bearer_token=os.environ.get("TWITTER_BEARER_TOKEN", ""),
        cors_origins=_env_list("CORS_ORIGINS"),
        persist_logs=_env_bool("PERSIST_LOGS", False),
    )


# ---------------------------------------------------------------------------
# Environment status (shown on the setup page)
# ---------------------------------------------------------------------------

@dataclass
class EnvStatus:
    llm: bool
    supabase: bool
    twitter: bool
    missing: List[str]
    message: str

    @property
    def demo_mode(self) -> bool:
        return not self.llm

    def to_dict(self) -> dict:
        return {
            "llm": self.llm,
            "supabase": self.supabase,
            "twitter": self.twitter,
            "demoMode": self.demo_mode,
            "missing": self.missing,
            "message": self.message,
        }


def get_env_message(missing: List[str]) -> str:
    if not missing:
        return "🎉 All API keys configured! Real agent functionality is active."
    return f"⚠️ Demo mode active. Missing: {', '.join(missing)}. Visit the setup guide to configure."


def get_env_status(settings: Settings = None) -> EnvStatus:
    """Report which integrations are configured and which keys are missing."""
    if settings is None:
        settings = get_settings()

    missing = []
    if not settings.deepseek_api_key:
        missing.append("DEEPSEEK_API_KEY")
    if not settings.supabase_url:
        missing.append("SUPABASE_URL")
    if not settings.supabase_service_key:
        missing.append("SUPABASE_SERVICE_KEY")
    if not settings.twitter_bearer_token:
        missing.append("TWITTER_BEARER_TOKEN")

    return EnvStatus(
        llm=settings.llm_configured,
        supabase=settings.supabase_configured,
        twitter=settings.twitter_configured,
        missing=missing,
        message=get_env_message(missing),
    )
