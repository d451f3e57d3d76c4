"""Abstract base class for key-value persistence backends.

This module defines the interface the conversation store persists through.
The abstraction hides:
- Storage format (dict, SQLite table)
- Persistence mechanism (in-memory, file)
- Connection management
"""

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """Abstract string key-value backend.

    Values are opaque strings; callers own their serialization.
    """

    @abstractmethod
    async def connect(self) -> None:
        """Initialize the backend."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the backend gracefully."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the value stored under key, or None if absent."""

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove key. Deleting a missing key is not an error."""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""
