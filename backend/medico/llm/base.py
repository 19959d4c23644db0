"""
LLM Provider Base - Abstract base for all generative-AI API providers.
Supports multimodal messages (text + inline images) and structured output.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, field


@dataclass
class InlineImage:
    """Raw image payload sent inline with a message."""
    mime_type: str
    data: str  # base64, without the data-URI prefix

    def to_data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


@dataclass
class LLMMessage:
    """
    One turn of a conversation.

    Roles follow the conversation model of the service: "user" for the
    person, "model" for the assistant. Providers translate roles as needed.
    """
    role: str
    text: str
    images: List[InlineImage] = field(default_factory=list)

    @staticmethod
    def user(text: str) -> "LLMMessage":
        """Create a text-only user message."""
        return LLMMessage(role="user", text=text)

    @staticmethod
    def model(text: str) -> "LLMMessage":
        """Create a text-only model message."""
        return LLMMessage(role="model", text=text)

    @staticmethod
    def multimodal(role: str, text: str, images: Optional[List[InlineImage]] = None) -> "LLMMessage":
        """Create a message with text and inline images."""
        return LLMMessage(role=role, text=text, images=list(images or []))

    @property
    def has_images(self) -> bool:
        return bool(self.images)


@dataclass
class LLMResponse:
    """Response from an LLM API call."""
    content: str
    model: str = ""
    usage: Dict[str, int] = field(default_factory=dict)
    finish_reason: Optional[str] = None
    raw: Optional[Dict[str, Any]] = None


class LLMProvider(ABC):
    """
    Abstract base class for LLM API providers.
    All providers must implement chat_completion.
    """

    name = "base"

    def __init__(self, api_key: str, model: str, base_url: Optional[str] = None,
                 default_temperature: float = 0.7, default_max_tokens: int = 2048,
                 timeout: float = 120.0):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.default_temperature = default_temperature
        self.default_max_tokens = default_max_tokens
        self.timeout = timeout

    @abstractmethod
    async def chat_completion(
        self,
        messages: List[LLMMessage],
        system_instruction: Optional[str] = None,
        response_schema: Optional[Dict[str, Any]] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        """
        Send a single request/response generation call.

        Args:
            messages: Conversation turns, oldest first (supports inline images)
            system_instruction: Optional system prompt for this call
            response_schema: Optional schema; when given the reply is JSON text
                matching it. Written in the upper-case OpenAPI subset
                ("OBJECT", "STRING", ...), providers convert as needed.
            temperature: Sampling temperature override
            max_tokens: Max output tokens override

        Returns:
            LLMResponse with the generated text
        """
        pass

    def _summarize(self, messages: List[LLMMessage]) -> str:
        """Short description of a request for debug logs."""
        summary = f"{len(messages)} messages"
        if messages:
            summary += f", last: {messages[-1].text[:200]}"
            if messages[-1].has_images:
                summary += f" (+{len(messages[-1].images)} images)"
        return summary
