"""
Chat Orchestrator - one linear message history per user and chat mode.

A send appends the user's message, asks the AI service for a reply, appends
the reply, and persists the whole list for that mode.
"""

import logging
from typing import List, Optional

from ..core.logging_config import LoggerAdapter
from ..models import Message, MessageRole, Attachment, ChatExchange, ViewState, is_chat_mode
from ..storage import UserStorage
from .ai_service import AIService
from . import prompts

logger = logging.getLogger(__name__)

SEND_FAILED_REPLY = "I'm sorry, something went wrong. Please check your connection and try again."


def greeting_for(mode: ViewState) -> Message:
    """Opening message shown for an empty conversation. Never persisted."""
    return Message(id=f"greeting-{mode.value}", role=MessageRole.MODEL, text=prompts.GREETINGS[mode])


def wants_metric_extraction(message: Message) -> bool:
    """Attachments or lab keywords make a message worth scanning for metrics."""
    if message.has_attachments:
        return True
    lowered = message.text.lower()
    return any(keyword in lowered for keyword in prompts.METRIC_KEYWORDS)


class ChatOrchestrator:
    """Coordinates chat history, the AI service and persistence."""

    def __init__(self, user_storage: UserStorage, ai_service: AIService):
        self.user_storage = user_storage
        self.ai_service = ai_service

    @staticmethod
    def _check_mode(mode: ViewState) -> None:
        if not is_chat_mode(mode):
            raise ValueError(f"{mode.value} is not a chat view")

    async def get_history(self, email: str, mode: ViewState) -> List[Message]:
        """Stored messages for the mode, or just the greeting if there are none."""
        self._check_mode(mode)
        messages = await self.user_storage.get_chats(email, mode)
        return messages or [greeting_for(mode)]

    async def clear_history(self, email: str, mode: ViewState) -> None:
        self._check_mode(mode)
        await self.user_storage.save_chats(email, mode, [])

    async def send_message(
        self,
        email: str,
        mode: ViewState,
        text: str,
        attachments: Optional[List[Attachment]] = None,
    ) -> ChatExchange:
        """
        Send one user message and record the model's reply.

        Raises:
            ValueError: If the mode is not a chat view or the message is empty
        """
        self._check_mode(mode)
        if not text.strip() and not attachments:
            raise ValueError("Message must contain text or an attachment")

        log = LoggerAdapter(logger, {"mode": mode.value})

        user_data = await self.user_storage.get_user_data(email)
        history = user_data.chats.get(mode.value, [])
        user_message = Message.create(MessageRole.USER, text, attachments)

        try:
            reply_text = await self.ai_service.send_message(
                history,
                user_message.text,
                attachments=user_message.attachments,
                health_context=user_data.health_stats,
                mode=mode,
            )
        except Exception as e:
            log.error(f"Chat send failed: {e}", exc_info=True)
            reply_text = SEND_FAILED_REPLY

        reply = Message.create(MessageRole.MODEL, reply_text)

        # Locked append: overlapping sends each keep their exchange
        stored = await self.user_storage.append_chat_messages(email, mode, [user_message, reply])

        log.info(
            "Chat message exchanged",
            extra={"extra_fields": {
                "history_length": len(stored),
                "attachments": len(user_message.attachments),
                "reply_length": len(reply_text),
            }}
        )

        metrics_found = 0
        if wants_metric_extraction(user_message):
            first_attachment = user_message.attachments[0] if user_message.attachments else None
            metrics = await self.ai_service.extract_health_metrics(user_message.text, first_attachment)
            if metrics:
                await self.user_storage.add_metrics(email, metrics)
                metrics_found = len(metrics)
                log.info(f"Extracted {metrics_found} health metric(s) from chat input")

        return ChatExchange(user_message=user_message, reply=reply, metrics_found=metrics_found)
