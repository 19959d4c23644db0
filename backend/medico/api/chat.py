"""
Chat API endpoints - Handle conversational interactions per chat mode.
Supports text messages and image attachments for multimodal analysis.
"""

from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Form, status, Response
from typing import List, Optional

from ..models import Message, ChatMessageRequest, ChatExchange, ViewState
from ..services import ChatOrchestrator
from ..utils.auth import get_current_user_email
from .deps import get_chat_orchestrator, require_chat_mode, read_image_upload

router = APIRouter(prefix="/chat", tags=["chat"])


@router.get("/{mode}/history", response_model=List[Message])
async def get_chat_history(
    mode: ViewState = Depends(require_chat_mode),
    email: str = Depends(get_current_user_email),
    orchestrator: ChatOrchestrator = Depends(get_chat_orchestrator),
):
    """Messages of one chat mode, oldest first."""
    return await orchestrator.get_history(email, mode)


@router.delete("/{mode}/history", status_code=status.HTTP_204_NO_CONTENT)
async def clear_chat_history(
    mode: ViewState = Depends(require_chat_mode),
    email: str = Depends(get_current_user_email),
    orchestrator: ChatOrchestrator = Depends(get_chat_orchestrator),
):
    await orchestrator.clear_history(email, mode)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{mode}/message", response_model=ChatExchange)
async def send_message(
    message: ChatMessageRequest,
    mode: ViewState = Depends(require_chat_mode),
    email: str = Depends(get_current_user_email),
    orchestrator: ChatOrchestrator = Depends(get_chat_orchestrator),
):
    """
    Send a chat message (attachments inline as base64) and get the AI reply.

    Returns:
        ChatExchange: the stored user message and the model reply
    """
    return await orchestrator.send_message(email, mode, message.text, message.attachments)


@router.post("/{mode}/message-with-image", response_model=ChatExchange)
async def send_message_with_image(
    content: str = Form(""),
    images: Optional[List[UploadFile]] = File(None),
    mode: ViewState = Depends(require_chat_mode),
    email: str = Depends(get_current_user_email),
    orchestrator: ChatOrchestrator = Depends(get_chat_orchestrator),
):
    """
    Send a chat message with image files as a multipart upload.
    Images are analyzed by the multimodal model (no OCR step).
    """
    attachments = [await read_image_upload(img) for img in images or []]
    if not content.strip() and not attachments:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Message must contain text or an image"
        )
    return await orchestrator.send_message(email, mode, content, attachments)
