"""
Reminder Models - medication and care reminders.
"""

import uuid
from typing import Optional, List
from pydantic import BaseModel, Field

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

ALL_DAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


class ReminderBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    time: str = Field(..., pattern=TIME_PATTERN)  # HH:mm
    category: str = "medication"
    days: List[str] = Field(default_factory=lambda: list(ALL_DAYS))


class ReminderCreate(ReminderBase):
    """Reminder creation payload."""
    pass


class ReminderUpdate(BaseModel):
    """Reminder update payload - all fields optional."""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    category: Optional[str] = None
    days: Optional[List[str]] = None
    active: Optional[bool] = None


class Reminder(ReminderBase):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    active: bool = True
