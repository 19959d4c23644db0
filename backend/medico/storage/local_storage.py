"""
Local Filesystem Key-Value Store.
Each key is one file under a base directory.
"""

import logging
import os
from pathlib import Path
from typing import Optional, List
from urllib.parse import quote, unquote

import aiofiles

from .interface import KeyValueStore
from ..core.exceptions import StorageError

logger = logging.getLogger(__name__)

VALUE_SUFFIX = ".json"


class LocalStorage(KeyValueStore):
    """
    Local filesystem key-value store.

    Keys are percent-encoded into file names, so emails and other user input
    can never escape the base directory.
    """

    def __init__(self, base_dir: str = "./data"):
        """
        Initialize local storage with a base directory.

        Args:
            base_dir: Base directory for all stored values
        """
        self.base_dir = Path(base_dir).resolve()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        if not key:
            raise StorageError("Storage key must not be empty", key=key)
        # "." is encoded too so ".." can never form a path component
        filename = quote(key, safe="@_-").replace(".", "%2E") + VALUE_SUFFIX
        return self.base_dir / filename

    @staticmethod
    def _key_for(filename: str) -> str:
        return unquote(filename[:-len(VALUE_SUFFIX)])

    async def get_item(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            async with aiofiles.open(path, 'r', encoding='utf-8') as f:
                return await f.read()
        except OSError as e:
            logger.error(f"Error reading key {key}: {e}", exc_info=True)
            raise StorageError(f"Could not read {key}", key=key) from e

    async def set_item(self, key: str, value: str) -> None:
        path = self._path_for(key)
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            async with aiofiles.open(tmp_path, 'w', encoding='utf-8') as f:
                await f.write(value)
            # Atomic replace, readers never see a half-written value
            os.replace(tmp_path, path)
        except OSError as e:
            logger.error(f"Error writing key {key}: {e}", exc_info=True)
            raise StorageError(f"Could not write {key}", key=key) from e

    async def remove_item(self, key: str) -> bool:
        path = self._path_for(key)
        if not path.exists():
            return False
        try:
            path.unlink()
            return True
        except OSError as e:
            logger.error(f"Error deleting key {key}: {e}", exc_info=True)
            raise StorageError(f"Could not delete {key}", key=key) from e

    async def keys(self, prefix: str = "") -> List[str]:
        found = [
            self._key_for(p.name)
            for p in self.base_dir.glob(f"*{VALUE_SUFFIX}")
            if p.is_file()
        ]
        return sorted(k for k in found if k.startswith(prefix))
