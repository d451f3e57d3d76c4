"""Tests for ConversationStore persistence and restore."""
import json

import pytest

from mercanto.conversation import HISTORY_KEY, ConversationStore, Message, serialize_conversation
from mercanto.memory import create_key_value_store


class TestLoad:
    """Tests for restoring a persisted conversation."""

    @pytest.mark.asyncio
    async def test_absent_snapshot_needs_bootstrap(self, store):
        result = await store.load()

        assert result.needs_bootstrap
        assert result.messages == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw", ["{broken", "[]", '{"role": "user"}', '[{"role": 1}]'])
    async def test_unusable_snapshot_needs_bootstrap(self, raw):
        """Test that invalid or empty snapshots are treated as absent."""
        backend = create_key_value_store("memory", initial={HISTORY_KEY: raw})
        store = ConversationStore(backend)

        result = await store.load()

        assert result.needs_bootstrap
        assert store.messages == []

    @pytest.mark.asyncio
    async def test_restores_valid_snapshot(self):
        messages = [Message.model("Hi, I'm Mercanto"), Message.user("Sales?"), Message.model("Up 5%")]
        backend = create_key_value_store(
            "memory", initial={HISTORY_KEY: serialize_conversation(messages)}
        )
        seen = []
        store = ConversationStore(backend, on_change=seen.append)

        result = await store.load()

        assert not result.needs_bootstrap
        assert result.messages == messages
        assert store.messages == messages
        assert seen == [messages]

    @pytest.mark.asyncio
    async def test_drops_stale_placeholders(self):
        """Test that a placeholder left by an interrupted turn is not restored."""
        messages = [Message.model("Hi"), Message.user("Sales?"), Message.placeholder()]
        backend = create_key_value_store(
            "memory", initial={HISTORY_KEY: serialize_conversation(messages)}
        )
        store = ConversationStore(backend)

        result = await store.load()

        assert result.messages == messages[:2]
        assert not store.has_pending()

    @pytest.mark.asyncio
    async def test_read_failure_needs_bootstrap(self, failing_backend):
        result = await ConversationStore(failing_backend).load()

        assert result.needs_bootstrap


class TestMutations:
    """Tests for append, replace_pending and clear."""

    @pytest.mark.asyncio
    async def test_append_persists_snapshot(self, store, backend):
        await store.append([Message.user("a"), Message.model("b")])

        raw = await backend.get(HISTORY_KEY)
        assert json.loads(raw) == [
            {"role": "user", "content": "a"},
            {"role": "model", "content": "b"},
        ]

    @pytest.mark.asyncio
    async def test_replace_pending_swaps_placeholder(self, store):
        await store.append([Message.model("Hi"), Message.user("q"), Message.placeholder("...")])

        await store.replace_pending(Message.model("answer"))

        assert store.messages == [Message.model("Hi"), Message.user("q"), Message.model("answer")]
        assert not store.has_pending()

    @pytest.mark.asyncio
    async def test_replace_pending_without_placeholder_appends(self, store):
        await store.append([Message.user("q")])

        await store.replace_pending(Message.model("answer"))

        assert store.messages == [Message.user("q"), Message.model("answer")]

    @pytest.mark.asyncio
    async def test_listener_runs_before_write(self, backend):
        """Test that observers see the new state even if the write is pending."""
        snapshots = []

        def on_change(messages):
            snapshots.append((list(messages), backend._data.get(HISTORY_KEY)))

        store = ConversationStore(backend, on_change=on_change)
        await store.append([Message.user("q")])

        assert snapshots[0][0] == [Message.user("q")]
        assert snapshots[0][1] is None

    @pytest.mark.asyncio
    async def test_clear_deletes_snapshot(self, store, backend):
        await store.append([Message.model("Hi")])

        await store.clear()

        assert store.messages == []
        assert await backend.get(HISTORY_KEY) is None

    @pytest.mark.asyncio
    async def test_clear_is_idempotent(self, store, backend):
        await store.clear()
        await store.clear()

        assert store.messages == []
        assert await backend.get(HISTORY_KEY) is None

    @pytest.mark.asyncio
    async def test_empty_conversation_is_never_written(self, backend):
        """Test that restoring nothing does not overwrite an existing snapshot."""
        await backend.set(HISTORY_KEY, "[]")
        store = ConversationStore(backend)

        await store.load()

        assert await backend.get(HISTORY_KEY) == "[]"

    @pytest.mark.asyncio
    async def test_persist_failure_keeps_memory_state(self, failing_backend):
        """Test that storage errors never reach the caller."""
        store = ConversationStore(failing_backend)

        await store.append([Message.user("q")])
        await store.replace_pending(Message.model("a"))
        await store.clear()
        await store.append([Message.model("again")])

        assert store.messages == [Message.model("again")]
