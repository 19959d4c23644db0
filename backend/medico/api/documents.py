"""
Documents endpoint - every file a user has uploaded in any chat.
"""

from datetime import datetime
from fastapi import APIRouter, Depends
from typing import List, Optional
from pydantic import BaseModel

from ..models import MessageRole, ViewState, CHAT_MODES
from ..storage import UserStorage, get_user_storage
from ..utils.auth import get_current_user_email

router = APIRouter(prefix="/documents", tags=["documents"])

PREVIEW_LENGTH = 100
NO_TEXT_PREVIEW = "Uploaded via Chat Interface"


class DocumentEntry(BaseModel):
    message_id: str
    mode: ViewState
    timestamp: datetime
    preview: str
    mime_type: str
    name: Optional[str] = None
    data: str


@router.get("", response_model=List[DocumentEntry])
async def list_documents(
    email: str = Depends(get_current_user_email),
    user_storage: UserStorage = Depends(get_user_storage),
):
    """User messages carrying attachments, newest first."""
    data = await user_storage.get_user_data(email)
    documents = []
    for mode in CHAT_MODES:
        for message in data.chats.get(mode.value, []):
            if message.role != MessageRole.USER:
                continue
            for attachment in message.attachments:
                documents.append(DocumentEntry(
                    message_id=message.id,
                    mode=mode,
                    timestamp=message.timestamp,
                    preview=message.text[:PREVIEW_LENGTH] or NO_TEXT_PREVIEW,
                    mime_type=attachment.mime_type,
                    name=attachment.name,
                    data=attachment.data,
                ))
    documents.sort(key=lambda d: d.timestamp, reverse=True)
    return documents
