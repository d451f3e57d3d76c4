"""Tests for the Gemini provider adapters and factory."""
import os

import pytest
from google.genai import errors, types

from mercanto.llm import (
    EmptyResponseError,
    GatewayError,
    GeminiProvider,
    HistoryTurn,
    create_llm_provider,
)
from mercanto.llm.providers.gemini import (
    GeminiChatSession,
    extract_text,
    to_contents,
    to_generate_config,
)


def make_response(*texts: str) -> types.GenerateContentResponse:
    return types.GenerateContentResponse(
        candidates=[
            types.Candidate(
                content=types.Content(role="model", parts=[types.Part(text=t) for t in texts])
            )
        ]
    )


class StubChat:
    """Stands in for a google-genai AsyncChat."""

    def __init__(self, response=None, error: Exception | None = None):
        self._response = response
        self._error = error

    async def send_message(self, message):
        if self._error is not None:
            raise self._error
        return self._response


class TestConversion:
    """Tests for history and config conversion."""

    def test_to_contents(self):
        contents = to_contents([
            HistoryTurn(role="model", text="Hi"),
            HistoryTurn(role="user", text="Sales?"),
        ])

        assert [c.role for c in contents] == ["model", "user"]
        assert [c.parts[0].text for c in contents] == ["Hi", "Sales?"]

    def test_standard_config_has_no_thinking(self):
        config = to_generate_config({"system_instruction": "Be Mercanto"})

        assert config.system_instruction == "Be Mercanto"
        assert config.thinking_config is None
        assert config.safety_settings

    def test_deep_config_sets_thinking_budget(self):
        config = to_generate_config({"system_instruction": "x", "reasoning_budget": 32768})

        assert config.thinking_config.thinking_budget == 32768


class TestExtractText:
    """Tests for extract_text."""

    def test_joins_parts(self):
        assert extract_text(make_response("Revenue ", "grew")) == "Revenue grew"

    def test_empty_response(self):
        assert extract_text(types.GenerateContentResponse(candidates=[])) == ""


class TestGeminiChatSession:
    """Tests for GeminiChatSession error mapping."""

    @pytest.mark.asyncio
    async def test_returns_text(self):
        session = GeminiChatSession(StubChat(make_response("ok")))

        assert await session.send_message("hi") == "ok"

    @pytest.mark.asyncio
    async def test_empty_reply_raises(self):
        session = GeminiChatSession(StubChat(make_response()))

        with pytest.raises(EmptyResponseError):
            await session.send_message("hi")

    @pytest.mark.asyncio
    async def test_api_error_becomes_gateway_error(self):
        error = errors.APIError(503, {"error": {"message": "overloaded", "status": "UNAVAILABLE"}})
        session = GeminiChatSession(StubChat(error=error))

        with pytest.raises(GatewayError) as exc_info:
            await session.send_message("hi")

        assert exc_info.value.__cause__ is error


class TestFactory:
    """Tests for create_llm_provider."""

    @pytest.mark.parametrize("name", ["gemini", "Google"])
    def test_creates_gemini(self, name):
        provider = create_llm_provider(name, api_key="test-key", model="gemini-2.5-flash")

        assert isinstance(provider, GeminiProvider)
        assert provider.model == "gemini-2.5-flash"

    def test_default_model(self):
        assert GeminiProvider(api_key="test-key").model == "gemini-3-pro-preview"

    def test_missing_api_key(self):
        with pytest.raises(TypeError):
            create_llm_provider("gemini")

    def test_unsupported_provider(self):
        with pytest.raises(ValueError, match="Unsupported provider"):
            create_llm_provider("openai", api_key="x")

    @pytest.mark.asyncio
    async def test_create_session_is_local(self):
        provider = GeminiProvider(api_key="test-key")

        async with provider:
            session = await provider.create_session(
                [HistoryTurn(role="model", text="Hi")],
                {"system_instruction": "x"},
            )

        assert isinstance(session, GeminiChatSession)


@pytest.mark.integration
@pytest.mark.asyncio
@pytest.mark.skipif(
    not (os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")),
    reason="GEMINI_API_KEY not set",
)
async def test_real_gemini_round_trip(api_keys):
    provider = GeminiProvider(api_key=api_keys["gemini"], model=os.getenv("GEMINI_MODEL", "gemini-2.5-flash"))
    session = await provider.create_session([], {"system_instruction": "Answer in one word."})

    reply = await session.send_message("Say hello")

    assert reply.strip()
