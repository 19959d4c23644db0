"""
Reminder endpoints. Each change is one locked read-modify-write of the user's document.
"""

from fastapi import APIRouter, Depends, HTTPException, status, Response
from typing import List

from ..core.exceptions import NotFoundError
from ..models import Reminder, ReminderCreate, ReminderUpdate
from ..storage import UserStorage, get_user_storage
from ..utils.auth import get_current_user_email

router = APIRouter(prefix="/reminders", tags=["reminders"])


def _not_found(e: NotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@router.get("", response_model=List[Reminder])
async def list_reminders(
    email: str = Depends(get_current_user_email),
    user_storage: UserStorage = Depends(get_user_storage),
):
    return await user_storage.get_reminders(email)


@router.post("", response_model=Reminder, status_code=status.HTTP_201_CREATED)
async def create_reminder(
    payload: ReminderCreate,
    email: str = Depends(get_current_user_email),
    user_storage: UserStorage = Depends(get_user_storage),
):
    return await user_storage.add_reminder(email, Reminder(**payload.model_dump()))


@router.patch("/{reminder_id}", response_model=Reminder)
async def update_reminder(
    reminder_id: str,
    payload: ReminderUpdate,
    email: str = Depends(get_current_user_email),
    user_storage: UserStorage = Depends(get_user_storage),
):
    try:
        return await user_storage.update_reminder(
            email, reminder_id, payload.model_dump(exclude_unset=True)
        )
    except NotFoundError as e:
        raise _not_found(e) from e


@router.post("/{reminder_id}/toggle", response_model=Reminder)
async def toggle_reminder(
    reminder_id: str,
    email: str = Depends(get_current_user_email),
    user_storage: UserStorage = Depends(get_user_storage),
):
    """Flip the active flag."""
    try:
        return await user_storage.toggle_reminder(email, reminder_id)
    except NotFoundError as e:
        raise _not_found(e) from e


@router.delete("/{reminder_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_reminder(
    reminder_id: str,
    email: str = Depends(get_current_user_email),
    user_storage: UserStorage = Depends(get_user_storage),
):
    try:
        await user_storage.delete_reminder(email, reminder_id)
    except NotFoundError as e:
        raise _not_found(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
