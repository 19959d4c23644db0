"""
User Models - email-only accounts and the per-user data document.
"""

from typing import Optional, List, Dict
from pydantic import BaseModel, EmailStr, Field, field_validator

from .message import Message
from .reminder import Reminder
from .health import HealthRiskProfile, HealthStats, HealthMetric
from .views import ViewState, CHAT_MODES, DEFAULT_VIEW


class UserAuth(BaseModel):
    """Register/login payload. Accounts have no password."""
    email: EmailStr

    @field_validator("email")
    @classmethod
    def _normalize(cls, value: str) -> str:
        return value.strip().lower()


class User(BaseModel):
    email: str
    current_view: ViewState = DEFAULT_VIEW


class Token(BaseModel):
    """JWT token response model."""
    access_token: str
    token_type: str = "bearer"
    email: str


class TokenData(BaseModel):
    """Token payload data."""
    email: Optional[str] = None


class ViewUpdate(BaseModel):
    view: ViewState


def empty_chats() -> Dict[str, List[Message]]:
    return {mode.value: [] for mode in CHAT_MODES}


class UserData(BaseModel):
    """Everything stored for one user, persisted as a single JSON document."""
    chats: Dict[str, List[Message]] = Field(default_factory=empty_chats)
    risk_profile: Optional[HealthRiskProfile] = None
    reminders: List[Reminder] = Field(default_factory=list)
    health_stats: Optional[HealthStats] = None
    metrics: List[HealthMetric] = Field(default_factory=list)
    current_view: ViewState = DEFAULT_VIEW
