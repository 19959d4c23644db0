"""Models module."""

from .views import ViewState, CHAT_MODES, resolve_view, is_chat_mode
from .message import MessageRole, Attachment, Message, ChatMessageRequest, ChatExchange
from .health import (
    HealthStats, VitalsHistoryPoint, HealthMetric, HealthRiskProfile,
    VitalStatus, VitalSign, HealthRiskAnalysis, RadarPoint, ReportAnalysisResult, Dashboard,
)
from .reminder import Reminder, ReminderCreate, ReminderUpdate
from .user import UserAuth, User, Token, TokenData, ViewUpdate, UserData

__all__ = [
    'ViewState', 'CHAT_MODES', 'resolve_view', 'is_chat_mode',
    'MessageRole', 'Attachment', 'Message', 'ChatMessageRequest', 'ChatExchange',
    'HealthStats', 'VitalsHistoryPoint', 'HealthMetric', 'HealthRiskProfile',
    'VitalStatus', 'VitalSign', 'HealthRiskAnalysis', 'RadarPoint', 'ReportAnalysisResult', 'Dashboard',
    'Reminder', 'ReminderCreate', 'ReminderUpdate',
    'UserAuth', 'User', 'Token', 'TokenData', 'ViewUpdate', 'UserData',
]
