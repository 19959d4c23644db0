"""LLM module - provides unified interface for generative-AI API providers."""

from .base import LLMProvider, LLMMessage, LLMResponse, InlineImage
from .gemini_provider import GeminiProvider
from .openai_provider import OpenAIProvider
from .factory import create_llm_provider

__all__ = [
    'LLMProvider',
    'LLMMessage',
    'LLMResponse',
    'InlineImage',
    'GeminiProvider',
    'OpenAIProvider',
    'create_llm_provider',
]
