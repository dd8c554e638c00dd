"""JWT bearer authentication for FastAPI routes.

Tokens are the frontend's NextAuth session JWTs (HS256, ``sub`` = user id).
"""

import os
from typing import Optional

import structlog
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from web.user_store import get_or_create_user

logger = structlog.get_logger()

ALGORITHM = "HS256"

# Missing credentials are handled here so every 401 carries the same message
security = HTTPBearer(auto_error=False)


def _get_jwt_secret() -> str:
    secret = os.getenv("NEXTAUTH_SECRET")
    if not secret:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="NEXTAUTH_SECRET not configured",
        )
    return secret


def _decode_user(token: str) -> Optional[dict]:
    """User dict from a valid token, None for an invalid one."""
    try:
        payload = jwt.decode(token, _get_jwt_secret(), algorithms=[ALGORITHM])
    except JWTError as e:
        logger.info("auth.invalid_token", error=str(e))
        return None
    user_id = payload.get("sub")
    if not user_id:
        return None
    get_or_create_user(user_id, email=payload.get("email"), name=payload.get("name"))
    return {
        "id": user_id,
        "email": payload.get("email"),
        "name": payload.get("name"),
    }


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """Authenticated user, or 401 Unauthorized."""
    user = _decode_user(credentials.credentials) if credentials else None
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return user


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[dict]:
    """Authenticated user, or None for anonymous visitors."""
    return _decode_user(credentials.credentials) if credentials else None
