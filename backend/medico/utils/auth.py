"""
Authentication utilities - JWT token handling.

Accounts are email-only: a token is issued after a membership check and
every request re-checks that the email is still registered.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from ..config import settings
from ..models import TokenData
from ..storage import UserStorage, get_user_storage

# Bearer token security
security = HTTPBearer()


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Data to encode in the token
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


def decode_access_token(token: str) -> Optional[TokenData]:
    """
    Decode and verify a JWT access token.

    Returns:
        Optional[TokenData]: Token data if valid, None otherwise
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None

    email = payload.get("sub")
    if email is None:
        return None
    return TokenData(email=email)


async def get_current_user_email(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    user_storage: UserStorage = Depends(get_user_storage),
) -> str:
    """
    Dependency to get the current user's email from the bearer token.

    Raises:
        HTTPException: If the token is invalid or the account no longer exists
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    token_data = decode_access_token(credentials.credentials)
    if token_data is None or token_data.email is None:
        raise credentials_exception

    if not await user_storage.verify_user(token_data.email):
        raise credentials_exception

    return token_data.email
