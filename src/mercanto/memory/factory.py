"""Factory for creating key-value persistence backends."""

from typing import Any

from .base import KeyValueStore


def create_key_value_store(
    backend: str = "memory",
    **kwargs: Any
) -> KeyValueStore:
    """Create a key-value persistence backend.

    Args:
        backend: Backend type ("memory" or "sqlite")
        **kwargs: Backend-specific configuration

    Returns:
        KeyValueStore instance

    Raises:
        ValueError: If backend type is not supported
    """
    if backend == "memory":
        from .in_memory import InMemoryKeyValueStore
        return InMemoryKeyValueStore(**kwargs)

    elif backend == "sqlite":
        from .sqlite import SQLiteKeyValueStore
        return SQLiteKeyValueStore(**kwargs)

    raise ValueError(
        f"Unsupported memory backend: {backend}. "
        f"Supported backends: memory, sqlite"
    )
