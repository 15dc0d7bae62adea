"""Supabase Auth dependency for FastAPI."""

import logging
import asyncio
import jwt as pyjwt
from jwt import PyJWKClient
from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from supabase import create_client, Client

from tweetcraft.core.config import get_settings
from tweetcraft.services.logging.service import set_user_id as set_logging_user_id

logger = logging.getLogger(__name__)
security = HTTPBearer(auto_error=False)

# Cached Supabase client, one per process
_supabase_client: Client | None = None

# Cached JWKS client for ES256 token validation
_jwks_client: PyJWKClient | None = None


def _get_jwks_client() -> PyJWKClient | None:
    """Get or create a cached JWKS client for the Supabase project."""
    global _jwks_client
    if _jwks_client is not None:
        return _jwks_client
    supabase_url = get_settings().supabase_url.rstrip("/")
    if not supabase_url:
        return None
    jwks_url = f"{supabase_url}/auth/v1/.well-known/jwks.json"
    _jwks_client = PyJWKClient(jwks_url, cache_keys=True, lifespan=3600, timeout=5)
    return _jwks_client


def get_supabase_client() -> Client:
    """Get or create a cached Supabase client with service role key."""
    global _supabase_client
    if _supabase_client is not None:
        return _supabase_client
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_service_key:
        raise HTTPException(status_code=503, detail="Supabase not configured")
    _supabase_client = create_client(settings.supabase_url, settings.supabase_service_key)
    return _supabase_client


def _extract_user(payload: dict) -> dict:
    """Extract user info from a decoded JWT payload."""
    return {
        "id": payload.get("sub", ""),
        "email": payload.get("email", ""),
        "role": payload.get("role") or "authenticated",
    }


def _authenticated(user: dict) -> dict:
    if not user.get("id"):
        raise HTTPException(status_code=401, detail="Invalid token")
    set_logging_user_id(user["id"])
    return user


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> dict:
    """Verify Supabase JWT and return user data.

    Tries validation in order:
    1. JWKS (ES256) — public key from the Supabase JWKS endpoint
    2. HS256 with SUPABASE_JWT_SECRET
    3. Supabase API call (slowest, but always works)

    Returns dict with: { "id": str, "email": str, "role": str }
    """
    if not credentials:
        raise HTTPException(status_code=401, detail="Not authenticated")

    token = credentials.credentials

    # --- 1. JWKS-based validation (ES256) ---
    jwks_client = _get_jwks_client()
    if jwks_client:
        try:
            signing_key = jwks_client.get_signing_key_from_jwt(token)
            payload = pyjwt.decode(
                token,
                signing_key.key,
                algorithms=["ES256"],
                audience="authenticated",
            )
            return _authenticated(_extract_user(payload))
        except pyjwt.ExpiredSignatureError:
            raise HTTPException(status_code=401, detail="Token expired")
        except (pyjwt.InvalidTokenError, pyjwt.PyJWKClientError) as e:
            logger.debug("JWKS validation failed: %s", e)

    # --- 2. HS256 with shared secret ---
    jwt_secret = get_settings().supabase_jwt_secret
    if jwt_secret:
        try:
            payload = pyjwt.decode(
                token,
                jwt_secret,
                algorithms=["HS256"],
                audience="authenticated",
            )
            return _authenticated(_extract_user(payload))
        except pyjwt.ExpiredSignatureError:
            raise HTTPException(status_code=401, detail="Token expired")
        except pyjwt.InvalidTokenError as e:
            logger.debug("HS256 validation failed: %s", e)

    # --- 3. Fallback: call Supabase API (with 5s timeout) ---
    supabase = get_supabase_client()
    try:
        response = await asyncio.wait_for(
            asyncio.to_thread(supabase.auth.get_user, token),
            timeout=5.0,
        )
    except asyncio.TimeoutError:
        raise HTTPException(status_code=504, detail="Auth service timeout")
    except Exception as e:
        logger.debug("Supabase token lookup failed: %s", e)
        raise HTTPException(status_code=401, detail="Authentication failed")

    user = response.user if response else None
    if not user:
        raise HTTPException(status_code=401, detail="Invalid token")
    return _authenticated({
        "id": user.id,
        "email": user.email or "",
        "role": user.role or "authenticated",
    })
