"""Conversation store.

Owns the ordered list of messages and its persisted snapshot. The in-memory
list is authoritative: persistence is best-effort and never raises into the
caller, and the change listener always runs before a write is attempted.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from ..memory import KeyValueStore
from .models import Message, deserialize_conversation, serialize_conversation

logger = logging.getLogger(__name__)

HISTORY_KEY = "mercanto_agent_history"

ChangeListener = Callable[[list[Message]], None]


@dataclass
class LoadResult:
    """Outcome of restoring the persisted conversation."""

    messages: list[Message] = field(default_factory=list)
    needs_bootstrap: bool = True


class ConversationStore:
    """Single owner of the conversation.

    Mutations: append, replace_pending, clear. Every mutation notifies the
    listener with a copy of the new conversation.
    """

    def __init__(
        self,
        backend: KeyValueStore,
        key: str = HISTORY_KEY,
        on_change: ChangeListener | None = None,
    ) -> None:
        self._backend = backend
        self._key = key
        self._messages: list[Message] = []
        self._on_change = on_change

    @property
    def messages(self) -> list[Message]:
        return list(self._messages)

    @property
    def backend(self) -> KeyValueStore:
        return self._backend

    def set_listener(self, on_change: ChangeListener | None) -> None:
        self._on_change = on_change

    async def load(self) -> LoadResult:
        """Restore the persisted conversation.

        An absent, unreadable or malformed snapshot (including an empty one)
        means the caller must bootstrap. Placeholders left behind by an
        interrupted turn are dropped.
        """
        try:
            raw = await self._backend.get(self._key)
        except Exception as e:
            logger.warning("Failed to read persisted conversation: %s", e)
            return LoadResult()

        if raw is None:
            logger.info("No persisted conversation found")
            return LoadResult()

        try:
            restored = deserialize_conversation(raw)
        except ValueError as e:
            logger.warning("Failed to parse persisted conversation: %s", e)
            return LoadResult()

        messages = [m for m in restored if not m.is_typing]
        if not messages:
            logger.info("Persisted conversation is empty")
            return LoadResult()

        self._messages = messages
        self._notify()
        logger.info("Restored %d message(s)", len(messages))
        return LoadResult(messages=list(messages), needs_bootstrap=False)

    async def append(self, messages: list[Message]) -> None:
        """Append messages in order and persist the result."""
        self._messages.extend(messages)
        self._notify()
        await self._persist()

    async def replace_pending(self, result: Message) -> None:
        """Drop every placeholder and append result."""
        self._messages = [m for m in self._messages if not m.is_typing]
        self._messages.append(result)
        self._notify()
        await self._persist()

    async def clear(self) -> None:
        """Empty the conversation and delete the persisted snapshot."""
        self._messages = []
        self._notify()
        try:
            await self._backend.delete(self._key)
        except Exception as e:
            logger.warning("Failed to delete persisted conversation: %s", e)

    def has_pending(self) -> bool:
        return any(m.is_typing for m in self._messages)

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(list(self._messages))

    async def _persist(self) -> None:
        # An empty conversation must never overwrite a valid snapshot
        if not self._messages:
            return
        try:
            await self._backend.set(self._key, serialize_conversation(self._messages))
        except Exception as e:
            logger.warning("Failed to persist conversation: %s", e)
