"""
Bearer token authentication for FastAPI.

Issues and verifies HS256 JWTs whose subject is the user id, and exposes
dependencies that gate routes on a valid token.
"""

import jwt
from datetime import datetime, timedelta, timezone
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional
from pydantic import BaseModel

from app.config import get_settings
from app.errors import UnauthorizedError

# HTTP Bearer scheme for extracting tokens
security = HTTPBearer(auto_error=False)


class AuthUser(BaseModel):
    """Identity asserted by a verified token."""
    id: int


def issue_token(user_id: int) -> str:
    """Sign a token for `user_id` that expires after the configured lifetime."""
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "id": user_id,
        "iat": now,
        "exp": now + timedelta(minutes=settings.token_expire_minutes),
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.token_algorithm)


def verify_token(token: str) -> int:
    """
    Verify a token and return the user id it asserts.

    Raises UnauthorizedError if the signature is bad, the token has expired,
    or the payload is malformed.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.token_algorithm],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise UnauthorizedError(f"Invalid token: {str(e)}")

    try:
        return int(payload["sub"])
    except (TypeError, ValueError):
        raise UnauthorizedError("Invalid token: malformed subject")


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> AuthUser:
    """
    FastAPI dependency to get the current authenticated user.

    Usage:
        @router.post("/protected")
        async def protected_route(user: AuthUser = Depends(get_current_user)):
            return {"user_id": user.id}
    """
    if credentials is None:
        raise UnauthorizedError("Not authenticated")

    return AuthUser(id=verify_token(credentials.credentials))
