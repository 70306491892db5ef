# supabase_client.py — Supabase client initialization and auth lookups

import logging

from supabase import create_client, Client
from config import SUPABASE_URL, SUPABASE_ANON_KEY

logger = logging.getLogger(__name__)

# Global Supabase client instance
_supabase_client: Client = None


def get_supabase_client() -> Client:
    """
    Get Supabase client with anonymous key (limited permissions).
    Enough to ask Supabase Auth who a user's access token belongs to.
    """
    global _supabase_client

    if _supabase_client is None:
        if not SUPABASE_URL or not SUPABASE_ANON_KEY:
            raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY must be set in environment variables")

        _supabase_client = create_client(SUPABASE_URL, SUPABASE_ANON_KEY)

    return _supabase_client


def is_supabase_configured() -> bool:
    """Check if Supabase Auth can be reached with the configured keys."""
    return bool(SUPABASE_URL and SUPABASE_ANON_KEY)


def get_user_from_token(access_token: str):
    """Return the Supabase auth user for an access token, or None if Supabase rejects it."""
    supabase = get_supabase_client()
    try:
        response = supabase.auth.get_user(access_token)
    except Exception as e:
        logger.warning(f"Supabase rejected access token: {e}")
        return None
    return response.user if response else None
