"""Conversation module.

The message-exchange pipeline between local conversation state and the
remote model:
- models.py: Message representation and persisted format
- store.py: ordered conversation, persistence and restore
- gateway.py: remote session lifecycle and failure fallback
- controller.py: user turns, bootstrap and reset
"""

from .controller import (
    BOOTSTRAP_ERROR_MESSAGE,
    DEEP_THINKING_HINT,
    TURN_ERROR_MESSAGE,
    ConversationController,
)
from .gateway import (
    FALLBACK_MESSAGE,
    THINKING_BUDGET,
    ModelGateway,
    SessionState,
    build_session_config,
    format_history,
)
from .models import Message, MessageRole, deserialize_conversation, serialize_conversation
from .store import HISTORY_KEY, ConversationStore, LoadResult

__all__ = [
    "BOOTSTRAP_ERROR_MESSAGE",
    "DEEP_THINKING_HINT",
    "FALLBACK_MESSAGE",
    "HISTORY_KEY",
    "THINKING_BUDGET",
    "TURN_ERROR_MESSAGE",
    "ConversationController",
    "ConversationStore",
    "LoadResult",
    "Message",
    "MessageRole",
    "ModelGateway",
    "SessionState",
    "build_session_config",
    "deserialize_conversation",
    "format_history",
    "serialize_conversation",
]
