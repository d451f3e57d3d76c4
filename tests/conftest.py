"""Pytest configuration and shared fixtures."""
import os
from typing import Any

import pytest

from mercanto.charts import ChartRenderer
from mercanto.conversation import ConversationController, ConversationStore, ModelGateway
from mercanto.llm import ChatSession, GatewayError, HistoryTurn, LLMProvider
from mercanto.memory import KeyValueStore, create_key_value_store


class FakeChatSession(ChatSession):
    """Chat session that answers from the owning FakeLLM."""

    def __init__(self, llm: "FakeLLM") -> None:
        self._llm = llm

    async def send_message(self, message: str) -> str:
        self._llm.sent.append(message)
        if self._llm.error is not None:
            raise self._llm.error
        if self._llm.replies:
            return self._llm.replies.pop(0)
        return f"echo: {message}"


class FakeLLM(LLMProvider):
    """LLM provider recording every session it opens."""

    def __init__(self, replies: list[str] | None = None, error: Exception | None = None) -> None:
        self.replies = list(replies or [])
        self.error = error
        self.sessions: list[tuple[list[HistoryTurn], dict[str, Any]]] = []
        self.sent: list[str] = []
        self.closed = False

    @property
    def model(self) -> str:
        return "fake-model"

    async def create_session(
        self,
        history: list[HistoryTurn],
        config: dict[str, Any],
    ) -> ChatSession:
        self.sessions.append((list(history), dict(config)))
        return FakeChatSession(self)

    async def close(self) -> None:
        self.closed = True


class FailingKeyValueStore(KeyValueStore):
    """Backend whose every operation fails."""

    async def connect(self) -> None:
        pass

    async def disconnect(self) -> None:
        pass

    async def get(self, key: str) -> str | None:
        raise OSError("storage unavailable")

    async def set(self, key: str, value: str) -> None:
        raise OSError("storage unavailable")

    async def delete(self, key: str) -> None:
        raise OSError("storage unavailable")

    @property
    def backend_type(self) -> str:
        return "failing"


@pytest.fixture
def fake_llm():
    """Return an LLM provider that echoes messages."""
    return FakeLLM()


@pytest.fixture
def failing_llm():
    """Return an LLM provider whose sessions raise a transport error."""
    return FakeLLM(error=GatewayError("connection reset"))


@pytest.fixture
def backend():
    """Return an empty in-memory key-value store."""
    return create_key_value_store("memory")


@pytest.fixture
def failing_backend():
    return FailingKeyValueStore()


@pytest.fixture
def store(backend):
    return ConversationStore(backend)


@pytest.fixture
def make_controller(backend):
    """Build a controller around the given LLM and the shared backend."""
    def _make(llm: LLMProvider, deep_thinking: bool = False) -> ConversationController:
        return ConversationController(
            ConversationStore(backend),
            ModelGateway(llm),
            deep_thinking=deep_thinking,
        )
    return _make


@pytest.fixture
def renderer(tmp_path):
    """Return a chart renderer writing into a temp directory."""
    chart_renderer = ChartRenderer(output_dir=tmp_path / "charts", width=4, height=3, dpi=50)
    yield chart_renderer
    chart_renderer.release_all()


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {
        "gemini": os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY"),
    }
