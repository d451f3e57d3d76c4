"""Tests for ModelGateway session handling and failure fallback."""
import pytest

from conftest import FakeLLM
from mercanto.conversation import (
    FALLBACK_MESSAGE,
    THINKING_BUDGET,
    Message,
    ModelGateway,
    SessionState,
    build_session_config,
    format_history,
)
from mercanto.llm import GatewayError, HistoryTurn
from mercanto.prompts import get_bootstrap_prompt, get_system_instruction


class TestSessionConfig:
    """Tests for build_session_config."""

    def test_standard_mode_has_no_reasoning_budget(self):
        """Test that standard mode omits the budget instead of sending zero."""
        config = build_session_config(deep_thinking=False)

        assert config == {"system_instruction": get_system_instruction()}

    def test_deep_thinking_sets_budget(self):
        config = build_session_config(deep_thinking=True)

        assert config["reasoning_budget"] == THINKING_BUDGET == 32768
        assert config["system_instruction"] == get_system_instruction()

    def test_system_instruction_mentions_chart_format(self):
        assert "json-chart" in get_system_instruction()


class TestFormatHistory:
    """Tests for format_history."""

    def test_filters_placeholders_and_empty_messages(self):
        messages = [
            Message.model("Hi"),
            Message.user("Sales?"),
            Message.model(""),
            Message.placeholder("Analyzing..."),
        ]

        assert format_history(messages) == [
            HistoryTurn(role="model", text="Hi"),
            HistoryTurn(role="user", text="Sales?"),
        ]

    def test_empty_history(self):
        assert format_history([]) == []


class TestModelGateway:
    """Tests for ModelGateway."""

    @pytest.mark.asyncio
    async def test_send_turn_rebuilds_session_from_history(self):
        llm = FakeLLM(replies=["Revenue grew 12%"])
        gateway = ModelGateway(llm)
        history = [Message.model("Hi"), Message.user("Hello")]

        reply = await gateway.send_turn("Revenue?", history, deep_thinking=True)

        assert reply == "Revenue grew 12%"
        assert llm.sent == ["Revenue?"]
        turns, config = llm.sessions[0]
        assert turns == format_history(history)
        assert config["reasoning_budget"] == THINKING_BUDGET

    @pytest.mark.asyncio
    async def test_each_turn_opens_a_new_session(self, fake_llm):
        gateway = ModelGateway(fake_llm)

        await gateway.send_turn("one", [])
        await gateway.send_turn("two", [Message.user("one"), Message.model("echo: one")])

        assert len(fake_llm.sessions) == 2
        assert "reasoning_budget" not in fake_llm.sessions[1][1]

    @pytest.mark.asyncio
    async def test_transport_error_returns_fallback(self, failing_llm):
        gateway = ModelGateway(failing_llm)

        reply = await gateway.send_turn("Revenue?", [])

        assert reply == FALLBACK_MESSAGE

    @pytest.mark.asyncio
    async def test_unexpected_error_returns_fallback(self):
        gateway = ModelGateway(FakeLLM(error=RuntimeError("boom")))

        assert await gateway.send_turn("Revenue?", []) == FALLBACK_MESSAGE

    @pytest.mark.asyncio
    async def test_bootstrap_uses_empty_history(self, fake_llm):
        gateway = ModelGateway(fake_llm)

        reply = await gateway.bootstrap()

        assert reply == f"echo: {get_bootstrap_prompt()}"
        turns, config = fake_llm.sessions[0]
        assert turns == []
        assert "reasoning_budget" not in config

    @pytest.mark.asyncio
    async def test_bootstrap_failure_raises(self):
        gateway = ModelGateway(FakeLLM(error=RuntimeError("offline")))

        with pytest.raises(GatewayError, match="offline"):
            await gateway.bootstrap()

    @pytest.mark.asyncio
    async def test_session_state_transitions(self, fake_llm):
        gateway = ModelGateway(fake_llm)
        assert gateway.state == SessionState.ABSENT

        await gateway.send_turn("hi", [])
        assert gateway.state == SessionState.ACTIVE

        gateway.reset_session()
        assert gateway.state == SessionState.ABSENT

    @pytest.mark.asyncio
    async def test_close_closes_provider(self, fake_llm):
        gateway = ModelGateway(fake_llm)

        await gateway.close()

        assert fake_llm.closed
        assert gateway.model_name == "fake-model"
