"""
Key-Value Store Interface - Abstract base for all storage implementations.

Mirrors the semantics of a browser's origin-scoped storage: string keys map
to string values (JSON text), writes replace the previous value, and the
last write wins.
"""

from abc import ABC, abstractmethod
from typing import Optional, List


class KeyValueStore(ABC):
    """
    Abstract key-value store.
    Implementations can be backed by local files, Redis, S3, etc.
    """

    @abstractmethod
    async def get_item(self, key: str) -> Optional[str]:
        """
        Read the value stored under ``key``.

        Returns:
            Optional[str]: The stored value, or None if the key is absent
        """
        pass

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """
        Store ``value`` under ``key``, replacing any previous value.

        Raises:
            StorageError: If the value could not be written
        """
        pass

    @abstractmethod
    async def remove_item(self, key: str) -> bool:
        """
        Delete ``key``.

        Returns:
            bool: True if the key existed
        """
        pass

    @abstractmethod
    async def keys(self, prefix: str = "") -> List[str]:
        """List stored keys, optionally only those starting with ``prefix``."""
        pass

    async def clear(self) -> None:
        """Remove every key."""
        for key in await self.keys():
            await self.remove_item(key)
