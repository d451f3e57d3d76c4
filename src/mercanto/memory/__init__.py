"""Local key-value persistence for mercanto.

Holds the conversation snapshot and UI preferences across restarts.
"""

from .base import KeyValueStore
from .factory import create_key_value_store

__all__ = [
    "KeyValueStore",
    "create_key_value_store",
]
