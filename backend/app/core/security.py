"""
Bearer-token authentication.

Tokens are HS256 JWTs whose `sub` claim is the user id. A token that decodes
is still refused unless a Session row holds it for the same user.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from app.api.deps import get_session_repository
from app.core.config import get_settings
from app.core.logging import get_logger
from app.services.interfaces.repositories import SessionRepository

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    payload = {"sub": str(user_id), "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_user_id(token: str) -> Optional[int]:
    """User id from a token, or None if the token is invalid or expired."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        return int(payload["sub"])
    except (JWTError, KeyError, TypeError, ValueError):
        return None


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="You must be signed in to continue",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    sessions: SessionRepository = Depends(get_session_repository),
) -> int:
    if credentials is None:
        raise _unauthorized()

    token = credentials.credentials
    user_id = decode_user_id(token)
    if user_id is None:
        logger.info("auth_rejected", reason="invalid_token")
        raise _unauthorized()

    session = await sessions.find_by_token(token)
    if not session or session.user_id != user_id:
        logger.info("auth_rejected", reason="no_session", user_id=user_id)
        raise _unauthorized()

    return user_id
