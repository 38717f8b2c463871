"""JSON file key-value backend."""

import asyncio
import contextlib
import json
import logging
import os
import tempfile
from typing import Dict, Optional

from ..errors import PersistenceError
from .base import KeyValueBackend


class JSONFileBackend(KeyValueBackend):
    """Keeps every key in a single JSON object file on local disk."""
    
    name = "file"
    
    def __init__(self, path: str, logger: Optional[logging.Logger] = None):
        """Initialize file backend.
        
        Args:
            path: Path of the JSON file (created on first write)
            logger: Optional logger instance
        """
        self.path = os.path.abspath(path)
        self.logger = logger or logging.getLogger(__name__)
    
    def _read_all(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Failed to read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceError(f"Unexpected content in {self.path}")
        return data
    
    def _write_all(self, data: Dict[str, str]) -> None:
        directory = os.path.dirname(self.path)
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f)
                os.replace(tmp_path, self.path)
            except BaseException:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise PersistenceError(f"Failed to write {self.path}: {e}") from e
    
    def _set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)
    
    def _delete(self, key: str) -> bool:
        data = self._read_all()
        if key not in data:
            return False
        del data[key]
        self._write_all(data)
        return True
    
    async def get(self, key: str) -> Optional[str]:
        data = await asyncio.to_thread(self._read_all)
        return data.get(key)
    
    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._set, key, value)
    
    async def delete(self, key: str) -> bool:
        return await asyncio.to_thread(self._delete, key)
    
    async def ping(self) -> bool:
        try:
            await asyncio.to_thread(self._read_all)
            return True
        except PersistenceError as e:
            self.logger.error(f"File backend unhealthy: {e}")
            return False
