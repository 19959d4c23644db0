"""Services module - AI request function, chat orchestration, derived views."""

from .ai_service import AIService, get_ai_service, default_risk_profile
from .chat_orchestrator import ChatOrchestrator

__all__ = ['AIService', 'get_ai_service', 'default_risk_profile', 'ChatOrchestrator']
