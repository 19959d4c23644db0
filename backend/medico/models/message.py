"""
Chat Message Models.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, List
from pydantic import BaseModel, Field, model_validator


class MessageRole(str, Enum):
    USER = "user"
    MODEL = "model"
    SYSTEM = "system"


class Attachment(BaseModel):
    """Inline file attached to a message (images only)."""
    mime_type: str
    data: str  # base64 payload without the data-URI prefix
    name: Optional[str] = None

    class Config:
        frozen = True


class Message(BaseModel):
    """A chat message. Never modified after creation."""
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    role: MessageRole
    text: str = ""
    attachments: List[Attachment] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Config:
        frozen = True

    @classmethod
    def create(cls, role: MessageRole, text: str, attachments: Optional[List[Attachment]] = None) -> "Message":
        return cls(role=role, text=text, attachments=list(attachments or []))

    @property
    def has_attachments(self) -> bool:
        return bool(self.attachments)


class ChatMessageRequest(BaseModel):
    """Body of POST /chat/{mode}/message."""
    text: str = ""
    attachments: List[Attachment] = Field(default_factory=list)

    @model_validator(mode="after")
    def _require_content(self) -> "ChatMessageRequest":
        if not self.text.strip() and not self.attachments:
            raise ValueError("Message must contain text or an attachment")
        return self


class ChatExchange(BaseModel):
    """Result of one send: the stored user message and the model reply."""
    user_message: Message
    reply: Message
    metrics_found: int = 0
