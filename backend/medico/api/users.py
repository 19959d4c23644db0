"""
User view-state endpoints: which screen the client should show.
"""

from fastapi import APIRouter, Depends

from ..models import ViewUpdate, ViewState
from ..storage import UserStorage, get_user_storage
from ..utils.auth import get_current_user_email

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me/view", response_model=ViewUpdate)
async def get_current_view(
    email: str = Depends(get_current_user_email),
    user_storage: UserStorage = Depends(get_user_storage),
):
    data = await user_storage.get_user_data(email)
    return ViewUpdate(view=data.current_view)


@router.put("/me/view", response_model=ViewUpdate)
async def set_current_view(
    payload: ViewUpdate,
    email: str = Depends(get_current_user_email),
    user_storage: UserStorage = Depends(get_user_storage),
):
    """Switch screens. Values outside ViewState are rejected by validation."""
    await user_storage.save_current_view(email, payload.view)
    return payload


@router.get("/views", response_model=list[ViewState])
async def list_views():
    """All screens a client can show."""
    return list(ViewState)
