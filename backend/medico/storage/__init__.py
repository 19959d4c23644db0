"""Storage module - key-value persistence and the user data layer on top of it."""

from .interface import KeyValueStore
from .local_storage import LocalStorage
from .user_storage import UserStorage, init_user_storage, get_user_storage

__all__ = ['KeyValueStore', 'LocalStorage', 'UserStorage', 'init_user_storage', 'get_user_storage']
