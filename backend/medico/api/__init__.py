"""API module - initialize routers."""

from .auth import router as auth_router
from .users import router as users_router
from .chat import router as chat_router
from .reports import router as reports_router
from .health import router as health_router
from .devices import router as devices_router
from .reminders import router as reminders_router
from .documents import router as documents_router

__all__ = [
    'auth_router', 'users_router', 'chat_router', 'reports_router',
    'health_router', 'devices_router', 'reminders_router', 'documents_router',
]
