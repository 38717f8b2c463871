"""In-memory key-value backend."""

from typing import Dict, Optional

from .base import KeyValueBackend


class InMemoryBackend(KeyValueBackend):
    """Dict-backed backend. State lives only as long as the process."""
    
    name = "memory"
    
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})
    
    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)
    
    async def set(self, key: str, value: str) -> None:
        self.data[key] = value
    
    async def delete(self, key: str) -> bool:
        return self.data.pop(key, None) is not None
    
    async def ping(self) -> bool:
        return True
