"""
Authentication API endpoints.

Sign up registers an email, log in checks that it is registered; both return
a bearer token. There are no passwords.
"""

import logging
from fastapi import APIRouter, HTTPException, status, Depends, Response

from ..models import UserAuth, Token, User
from ..storage import UserStorage, get_user_storage
from ..utils.auth import create_access_token, get_current_user_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


def _token_for(email: str) -> Token:
    return Token(access_token=create_access_token(data={"sub": email}), email=email)


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
async def register(
    payload: UserAuth,
    user_storage: UserStorage = Depends(get_user_storage),
):
    """
    Register a new email.

    Raises:
        HTTPException: 409 if the email is already registered
    """
    if not await user_storage.register_user(payload.email):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="This email is already registered. Please Login."
        )
    return _token_for(payload.email)


@router.post("/login", response_model=Token)
async def login(
    payload: UserAuth,
    user_storage: UserStorage = Depends(get_user_storage),
):
    """
    Log in with a registered email.

    Raises:
        HTTPException: 404 if the email is not registered
    """
    if not await user_storage.verify_user(payload.email):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="This email is not registered. Please Sign Up to continue."
        )
    logger.info("User logged in")
    return _token_for(payload.email)


@router.get("/me", response_model=User)
async def get_current_user(
    email: str = Depends(get_current_user_email),
    user_storage: UserStorage = Depends(get_user_storage),
):
    """Get the current account."""
    data = await user_storage.get_user_data(email)
    return User(email=email, current_view=data.current_view)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account(
    email: str = Depends(get_current_user_email),
    user_storage: UserStorage = Depends(get_user_storage),
):
    """Delete the current account and all of its data."""
    await user_storage.delete_user(email)
    logger.info("User account deleted")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
