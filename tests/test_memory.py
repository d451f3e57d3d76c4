"""Tests for the key-value persistence backends."""
import pytest
import pytest_asyncio

from mercanto.memory import create_key_value_store


@pytest_asyncio.fixture(params=["memory", "sqlite"])
async def kv_store(request, tmp_path):
    """Yield each backend, connected."""
    if request.param == "sqlite":
        kv = create_key_value_store("sqlite", path=tmp_path / "store.db")
    else:
        kv = create_key_value_store("memory")
    await kv.connect()
    yield kv
    await kv.disconnect()


class TestKeyValueStore:
    """Behaviour shared by every backend."""

    @pytest.mark.asyncio
    async def test_get_missing_key(self, kv_store):
        assert await kv_store.get("absent") is None

    @pytest.mark.asyncio
    async def test_set_and_overwrite(self, kv_store):
        await kv_store.set("k", "one")
        await kv_store.set("k", "two")

        assert await kv_store.get("k") == "two"

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, kv_store):
        await kv_store.set("k", "v")

        await kv_store.delete("k")
        await kv_store.delete("k")

        assert await kv_store.get("k") is None

    @pytest.mark.asyncio
    async def test_keys_are_independent(self, kv_store):
        await kv_store.set("a", "1")
        await kv_store.set("b", "2")
        await kv_store.delete("a")

        assert await kv_store.get("b") == "2"


class TestSQLiteKeyValueStore:
    """Tests specific to the SQLite backend."""

    @pytest.mark.asyncio
    async def test_persists_across_connections(self, tmp_path):
        path = tmp_path / "nested" / "store.db"
        first = create_key_value_store("sqlite", path=path)
        await first.set("mercanto_theme", "light")
        await first.disconnect()

        second = create_key_value_store("sqlite", path=path)
        try:
            assert await second.get("mercanto_theme") == "light"
        finally:
            await second.disconnect()

        assert path.exists()
        assert second.db_path == path
        assert second.backend_type == "sqlite"


class TestFactory:
    """Tests for create_key_value_store."""

    def test_memory_with_initial_data(self):
        kv = create_key_value_store("memory", initial={"k": "v"})

        assert kv.backend_type == "memory"

    def test_unsupported_backend(self):
        with pytest.raises(ValueError, match="Unsupported memory backend"):
            create_key_value_store("postgres")
