"""Backend selection from configuration."""

import logging
from typing import Optional

from .base import KeyValueBackend
from .file_backend import JSONFileBackend
from .memory import InMemoryBackend
from .redis_backend import RedisBackend


def create_backend(config, logger: Optional[logging.Logger] = None) -> KeyValueBackend:
    """Create the key-value backend named by ``config.store_backend``.
    
    Args:
        config: Configuration instance
        logger: Optional logger
        
    Returns:
        Backend instance
        
    Raises:
        ValueError: If the backend name is unknown or its settings are missing
    """
    kind = config.store_backend.lower()
    
    if kind == "memory":
        return InMemoryBackend()
    
    if kind == "file":
        return JSONFileBackend(config.store_path, logger=logger)
    
    if kind == "redis":
        if not config.redis_url:
            raise ValueError("REDIS_URL is required when STORE_BACKEND=redis")
        return RedisBackend(config.redis_url, logger=logger)
    
    raise ValueError(f"Unknown store backend: {config.store_backend}")
