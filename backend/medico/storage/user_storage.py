"""
User Storage - email-keyed accounts and per-user data documents.

Layout inside the key-value store:
    medico_users          JSON list of registered emails
    medico_data_<email>   one JSON document per user (see UserData)
"""

import asyncio
import json
import logging
from typing import Optional, List, Dict, Callable, Any

from pydantic import BaseModel, ValidationError

from .interface import KeyValueStore
from .local_storage import LocalStorage
from ..core.exceptions import NotFoundError
from ..models import (
    Message, Reminder, HealthRiskProfile, HealthStats, HealthMetric,
    UserData, ViewState, CHAT_MODES, resolve_view,
)

logger = logging.getLogger(__name__)

USERS_KEY = "medico_users"
DATA_PREFIX = "medico_data_"


def _validate_list(model: type, items: Any, what: str) -> list:
    """Validate each entry of a stored list, dropping the ones that do not parse."""
    if not isinstance(items, list):
        return []
    valid = []
    for item in items:
        try:
            valid.append(model.model_validate(item))
        except ValidationError:
            logger.warning(f"Skipping malformed stored {what}")
    return valid


def _validate_optional(model: type, value: Any) -> Optional[BaseModel]:
    if value is None:
        return None
    try:
        return model.model_validate(value)
    except ValidationError:
        logger.warning(f"Discarding malformed stored {model.__name__}")
        return None


def hydrate_user_data(raw: Any) -> UserData:
    """
    Build a complete UserData from whatever a stored document holds.

    Missing sections fall back to their defaults, so a partial or older
    document still yields every chat mode, an empty reminder list, etc.
    """
    if not isinstance(raw, dict):
        return UserData()

    chats_raw = raw.get("chats")
    if not isinstance(chats_raw, dict):
        chats_raw = {}

    return UserData(
        chats={
            mode.value: _validate_list(Message, chats_raw.get(mode.value), "message")
            for mode in CHAT_MODES
        },
        risk_profile=_validate_optional(HealthRiskProfile, raw.get("risk_profile")),
        reminders=_validate_list(Reminder, raw.get("reminders"), "reminder"),
        health_stats=_validate_optional(HealthStats, raw.get("health_stats")),
        metrics=_validate_list(HealthMetric, raw.get("metrics"), "metric"),
        current_view=resolve_view(raw.get("current_view")),
    )


class UserStorage:
    """
    Manages accounts and per-user data on top of a KeyValueStore.

    Partial updates are read-modify-write on the whole document and are
    serialized per instance.
    """

    def __init__(self, store: KeyValueStore):
        """
        Initialize user storage.

        Args:
            store: KeyValueStore implementation (typically LocalStorage)
        """
        self.store = store
        self._lock = asyncio.Lock()

    @staticmethod
    def data_key(email: str) -> str:
        return f"{DATA_PREFIX}{email}"

    # --- Accounts ---

    async def get_users(self) -> List[str]:
        """Return every registered email."""
        stored = await self.store.get_item(USERS_KEY)
        if stored is None:
            return []
        try:
            users = json.loads(stored)
        except json.JSONDecodeError:
            logger.error("User list is not valid JSON, treating as empty")
            return []
        return [u for u in users if isinstance(u, str)] if isinstance(users, list) else []

    async def register_user(self, email: str) -> bool:
        """
        Register an email and initialise its empty data document.

        Returns:
            bool: False if the email was already registered
        """
        async with self._lock:
            users = await self.get_users()
            if email in users:
                return False

            users.append(email)
            await self.store.set_item(USERS_KEY, json.dumps(users, ensure_ascii=False))
            await self._write(email, UserData())

        logger.info("User registered", extra={"extra_fields": {"user_count": len(users)}})
        return True

    async def verify_user(self, email: str) -> bool:
        """Membership check used in place of a credential check."""
        return email in await self.get_users()

    async def delete_user(self, email: str) -> bool:
        """Remove an account and its data document."""
        async with self._lock:
            users = await self.get_users()
            if email not in users:
                return False
            users.remove(email)
            await self.store.set_item(USERS_KEY, json.dumps(users, ensure_ascii=False))
            await self.store.remove_item(self.data_key(email))
        return True

    # --- User data ---

    async def get_user_data(self, email: str) -> UserData:
        """Load a user's document, always returning a full structure."""
        stored = await self.store.get_item(self.data_key(email))
        if stored is None:
            return UserData()
        try:
            raw = json.loads(stored)
        except json.JSONDecodeError:
            logger.error("Error parsing user data, falling back to defaults", exc_info=True)
            return UserData()
        return hydrate_user_data(raw)

    async def save_user_data(self, email: str, data: UserData) -> None:
        async with self._lock:
            await self._write(email, data)

    async def _write(self, email: str, data: UserData) -> None:
        content = json.dumps(data.model_dump(mode="json"), ensure_ascii=False)
        await self.store.set_item(self.data_key(email), content)

    async def _update(self, email: str, mutate: Callable[[UserData], None]) -> UserData:
        async with self._lock:
            data = await self.get_user_data(email)
            mutate(data)
            await self._write(email, data)
            return data

    # --- Partial updates ---

    async def save_chats(self, email: str, mode: ViewState, messages: List[Message]) -> None:
        def mutate(data: UserData) -> None:
            data.chats[mode.value] = list(messages)
        await self._update(email, mutate)

    async def get_chats(self, email: str, mode: ViewState) -> List[Message]:
        data = await self.get_user_data(email)
        return data.chats.get(mode.value, [])

    async def append_chat_messages(self, email: str, mode: ViewState, messages: List[Message]) -> List[Message]:
        """Append to a mode's history in one locked read-modify-write; returns the full list."""
        def mutate(data: UserData) -> None:
            data.chats.setdefault(mode.value, []).extend(messages)
        data = await self._update(email, mutate)
        return data.chats[mode.value]

    async def save_risk_profile(self, email: str, profile: HealthRiskProfile) -> None:
        def mutate(data: UserData) -> None:
            data.risk_profile = profile
        await self._update(email, mutate)

    async def save_reminders(self, email: str, reminders: List[Reminder]) -> None:
        def mutate(data: UserData) -> None:
            data.reminders = list(reminders)
        await self._update(email, mutate)

    async def get_reminders(self, email: str) -> List[Reminder]:
        data = await self.get_user_data(email)
        return data.reminders

    async def add_reminder(self, email: str, reminder: Reminder) -> Reminder:
        def mutate(data: UserData) -> None:
            data.reminders.append(reminder)
        await self._update(email, mutate)
        return reminder

    @staticmethod
    def _reminder_index(data: UserData, reminder_id: str) -> int:
        for i, reminder in enumerate(data.reminders):
            if reminder.id == reminder_id:
                return i
        raise NotFoundError("Reminder not found", item_id=reminder_id)

    async def update_reminder(self, email: str, reminder_id: str, changes: Dict[str, Any]) -> Reminder:
        """
        Apply field changes to one reminder.

        Raises:
            NotFoundError: If no reminder has that id (nothing is written)
        """
        def mutate(data: UserData) -> None:
            i = self._reminder_index(data, reminder_id)
            data.reminders[i] = data.reminders[i].model_copy(update=changes)
        data = await self._update(email, mutate)
        return data.reminders[self._reminder_index(data, reminder_id)]

    async def toggle_reminder(self, email: str, reminder_id: str) -> Reminder:
        """Flip the active flag. Raises NotFoundError for an unknown id."""
        def mutate(data: UserData) -> None:
            i = self._reminder_index(data, reminder_id)
            current = data.reminders[i]
            data.reminders[i] = current.model_copy(update={"active": not current.active})
        data = await self._update(email, mutate)
        return data.reminders[self._reminder_index(data, reminder_id)]

    async def delete_reminder(self, email: str, reminder_id: str) -> None:
        """Raises NotFoundError for an unknown id."""
        def mutate(data: UserData) -> None:
            del data.reminders[self._reminder_index(data, reminder_id)]
        await self._update(email, mutate)

    async def save_health_stats(self, email: str, stats: HealthStats) -> None:
        def mutate(data: UserData) -> None:
            data.health_stats = stats
        await self._update(email, mutate)

    async def get_health_stats(self, email: str) -> Optional[HealthStats]:
        data = await self.get_user_data(email)
        return data.health_stats

    async def clear_health_stats(self, email: str) -> None:
        def mutate(data: UserData) -> None:
            data.health_stats = None
        await self._update(email, mutate)

    async def add_metrics(self, email: str, metrics: List[HealthMetric]) -> List[HealthMetric]:
        """Append metrics to the user's log and return the full log."""
        def mutate(data: UserData) -> None:
            data.metrics.extend(metrics)
        data = await self._update(email, mutate)
        return data.metrics

    async def get_metrics(self, email: str) -> List[HealthMetric]:
        data = await self.get_user_data(email)
        return data.metrics

    async def save_current_view(self, email: str, view: ViewState) -> None:
        def mutate(data: UserData) -> None:
            data.current_view = view
        await self._update(email, mutate)


# Global user storage instance
_user_storage: Optional[UserStorage] = None


def init_user_storage(store: Optional[KeyValueStore] = None) -> UserStorage:
    """
    Initialize the global user storage instance.

    Args:
        store: Optional KeyValueStore implementation. If None, creates LocalStorage.
    """
    global _user_storage
    if store is None:
        store = LocalStorage()
    _user_storage = UserStorage(store)
    return _user_storage


def get_user_storage() -> UserStorage:
    """
    Get the global user storage instance (also used as a FastAPI dependency).

    Raises:
        RuntimeError: If user storage has not been initialized
    """
    if _user_storage is None:
        raise RuntimeError("User storage not initialized. Call init_user_storage() first.")
    return _user_storage
