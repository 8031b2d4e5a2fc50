"""
Authentication utilities - JWT claim extraction for bearer tokens issued
by the upstream identity provider.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from ..config import settings

# Bearer token security
security = HTTPBearer()

ANONYMOUS_EMAIL = "Anonymous"


@dataclass
class Claims:
    """Caller identity taken from the token."""
    user_id: str
    email: str = ANONYMOUS_EMAIL


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Claims to encode ("sub" and optionally "email")
        expires_delta: Optional expiration time delta

    Returns:
        str: Encoded JWT token
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Optional[Claims]:
    """
    Decode and verify a JWT access token.

    Returns:
        Optional[Claims]: Claims if the token is valid and carries "sub", None otherwise
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None

    user_id = payload.get("sub")
    if not user_id:
        return None
    return Claims(user_id=user_id, email=payload.get("email") or ANONYMOUS_EMAIL)


async def get_current_claims(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> Claims:
    """
    Dependency to get the caller's claims from the bearer token.

    Raises:
        HTTPException: If the token is invalid
    """
    claims = decode_access_token(credentials.credentials)
    if claims is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return claims
