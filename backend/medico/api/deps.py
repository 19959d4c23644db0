"""
Shared API dependencies.
"""

import base64
from fastapi import Depends, HTTPException, UploadFile, status

from ..models import Attachment, ViewState, is_chat_mode
from ..services import AIService, ChatOrchestrator, get_ai_service
from ..storage import UserStorage, get_user_storage

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/jpg", "image/webp", "image/gif", "image/heic"}


def get_chat_orchestrator(
    user_storage: UserStorage = Depends(get_user_storage),
    ai_service: AIService = Depends(get_ai_service),
) -> ChatOrchestrator:
    return ChatOrchestrator(user_storage, ai_service)


def require_chat_mode(mode: ViewState) -> ViewState:
    """Path dependency: only views with their own chat history are accepted."""
    if not is_chat_mode(mode):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"'{mode.value}' has no chat",
        )
    return mode


async def read_image_upload(upload: UploadFile) -> Attachment:
    """Validate an uploaded image and convert it to an inline attachment."""
    if upload.content_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported image type: {upload.content_type}"
        )
    data = await upload.read()
    if not data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Uploaded image is empty"
        )
    return Attachment(
        mime_type=upload.content_type,
        data=base64.b64encode(data).decode("utf-8"),
        name=upload.filename,
    )
