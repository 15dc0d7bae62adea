"""
System endpoints — integration status and deep health check.
No authentication required.
"""
import time
from datetime import datetime, timezone

import httpx
from fastapi import APIRouter, Depends
from sqlalchemy import func, text
from sqlalchemy.orm import Session

from tweetcraft.core.config import get_env_status, get_settings
from tweetcraft.db_connection import get_db
from tweetcraft.models import Tweet

router = APIRouter(prefix="/api/system", tags=["system"])


def _timed_check(fn):
    """Run *fn* and return a check result dict with its latency."""
    start = time.monotonic()
    try:
        result = fn()
        latency = round((time.monotonic() - start) * 1000, 1)
        return {"status": "ok", "latency_ms": latency, **(result or {})}
    except Exception as exc:
        latency = round((time.monotonic() - start) * 1000, 1)
        return {"status": "error", "latency_ms": latency, "error": str(exc)[:200]}


def _check_supabase_auth():
    supabase_url = get_settings().supabase_url.rstrip("/")
    if not supabase_url:
        raise RuntimeError("SUPABASE_URL not configured")
    resp = httpx.get(f"{supabase_url}/auth/v1/.well-known/jwks.json", timeout=3)
    resp.raise_for_status()
    return None


@router.get("/env-status")
def env_status():
    """Which integrations are configured, and whether drafts are demo-only."""
    return get_env_status().to_dict()


@router.get("/health-check")
def deep_health_check(db: Session = Depends(get_db)):
    """
    Deep health check — tests database and auth.
    Returns per-subsystem latency and overall status.
    """
    total_start = time.monotonic()

    def check_database():
        db.execute(text("SELECT 1"))

    def check_tweets_count():
        return {"count": db.query(func.count(Tweet.id)).scalar()}

    checks = {
        "database": _timed_check(check_database),
        "supabase_auth": _timed_check(_check_supabase_auth),
        "tweets_count": _timed_check(check_tweets_count),
    }

    total_latency = round((time.monotonic() - total_start) * 1000, 1)

    db_ok = checks["database"]["status"] == "ok"
    if all(c["status"] == "ok" for c in checks.values()):
        status = "healthy"
    elif db_ok:
        status = "degraded"
    else:
        status = "unhealthy"

    return {
        "status": status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": checks,
        "total_latency_ms": total_latency,
    }
