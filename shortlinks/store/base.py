"""Abstract base class for key-value backends."""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueBackend(ABC):
    """Abstract base class for the string key-value store under RecordStore.
    
    Implementations raise PersistenceError on any underlying failure.
    """
    
    name = "abstract"
    
    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Get the raw value stored under a key.
        
        Args:
            key: Storage key
            
        Returns:
            The stored string or None if the key is absent
        """
        pass
    
    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store a raw value under a key, replacing any previous value.
        
        Args:
            key: Storage key
            value: Serialized value
        """
        pass
    
    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete a key.
        
        Args:
            key: Storage key
            
        Returns:
            True if the key existed
        """
        pass
    
    @abstractmethod
    async def ping(self) -> bool:
        """Check if the backend is reachable.
        
        Returns:
            True if healthy, False otherwise
        """
        pass
    
    async def close(self) -> None:
        """Release backend resources."""
        pass
