"""
View Models - The fixed set of screens a client can show.
"""

from enum import Enum
from typing import Optional


class ViewState(str, Enum):
    """Mutually exclusive client screens."""
    DASHBOARD = "dashboard"
    CHAT = "chat"
    MEDICINE = "medicine"
    REMEDY = "remedy"
    REPORTS = "reports"
    REMINDERS = "reminders"
    DEVICES = "devices"
    DOCUMENTS = "documents"
    SETTINGS = "settings"


# Views that own an independent chat history
CHAT_MODES = (ViewState.CHAT, ViewState.MEDICINE, ViewState.REMEDY)

DEFAULT_VIEW = ViewState.DASHBOARD


def resolve_view(value: Optional[str]) -> ViewState:
    """Map a stored or requested view name to a ViewState, defaulting to the dashboard."""
    try:
        return ViewState(value)
    except ValueError:
        return DEFAULT_VIEW


def is_chat_mode(view: ViewState) -> bool:
    return view in CHAT_MODES
