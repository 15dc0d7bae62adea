"""Auth module — Supabase JWT authentication."""
from tweetcraft.api.auth.middleware import get_current_user  # noqa: F401
