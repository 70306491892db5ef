import logging

from fastapi import Request, HTTPException, status
from jose import jwt, JWTError

from config import SUPABASE_JWT_SECRET, JWT_ALGORITHM, JWT_AUDIENCE
from errors import ErrorMessages
from supabase_client import get_user_from_token, is_supabase_configured

logger = logging.getLogger(__name__)


def verify_token(token: str) -> dict | None:
    """
    Verify a Supabase access token and return its claims, or None.
    With SUPABASE_JWT_SECRET set the signature is checked locally;
    otherwise Supabase Auth is asked directly.
    """
    if SUPABASE_JWT_SECRET:
        try:
            return jwt.decode(token, SUPABASE_JWT_SECRET, algorithms=[JWT_ALGORITHM], audience=JWT_AUDIENCE)
        except JWTError:
            return None

    if is_supabase_configured():
        user = get_user_from_token(token)
        if user is None:
            return None
        return {"sub": user.id, "email": getattr(user, "email", None)}

    logger.error("Cannot verify tokens: set SUPABASE_JWT_SECRET or SUPABASE_URL and SUPABASE_ANON_KEY")
    return None


async def get_current_user(request: Request) -> str:
    """
    FastAPI dependency — extracts the Bearer token from the Authorization
    header, verifies it, and returns the Supabase user id.
    Raises HTTP 401 if the token is missing or invalid.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=ErrorMessages.AUTH_MISSING,
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = auth_header.split(" ", 1)[1]
    payload = verify_token(token)
    if payload is None or not payload.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=ErrorMessages.AUTH_INVALID,
            headers={"WWW-Authenticate": "Bearer"},
        )

    return payload["sub"]
