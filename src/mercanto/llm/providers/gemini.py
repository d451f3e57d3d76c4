"""Google Gemini LLM provider implementation.

Uses the official Google GenAI SDK for async chat sessions.
Reference: https://github.com/googleapis/python-genai

Note: Gemini can return empty responses due to safety filtering or service issues.
Empty replies are reported as EmptyResponseError rather than an empty string.
"""

from typing import Any

from google import genai
from google.genai import errors, types

from ..base import ChatSession, LLMProvider
from ..errors import EmptyResponseError, GatewayError
from ..models import HistoryTurn

# Relaxed so that frank business advice (competitors, pricing wars) is not blocked
DEFAULT_SAFETY_SETTINGS = [
    types.SafetySetting(category="HARM_CATEGORY_HARASSMENT", threshold="BLOCK_ONLY_HIGH"),
    types.SafetySetting(category="HARM_CATEGORY_HATE_SPEECH", threshold="BLOCK_ONLY_HIGH"),
    types.SafetySetting(category="HARM_CATEGORY_SEXUALLY_EXPLICIT", threshold="BLOCK_ONLY_HIGH"),
    types.SafetySetting(category="HARM_CATEGORY_DANGEROUS_CONTENT", threshold="BLOCK_ONLY_HIGH"),
]


def extract_text(response: Any) -> str:
    """Extract text content from a Gemini response, handling empty responses.

    Args:
        response: Gemini GenerateContentResponse

    Returns:
        Text content or empty string
    """
    if response.candidates and len(response.candidates) > 0:
        candidate = response.candidates[0]
        if candidate.content and candidate.content.parts:
            texts = [part.text for part in candidate.content.parts if getattr(part, "text", None)]
            if texts:
                return "".join(texts)

    # Fallback to response.text (may raise or return None)
    try:
        return response.text or ""
    except (ValueError, AttributeError):
        return ""


def to_contents(history: list[HistoryTurn]) -> list[types.Content]:
    """Convert history turns to Gemini contents."""
    return [
        types.Content(role=turn.role, parts=[types.Part(text=turn.text)])
        for turn in history
    ]


def to_generate_config(config: dict[str, Any]) -> types.GenerateContentConfig:
    """Translate a session configuration into a Gemini GenerateContentConfig.

    The thinking configuration is only attached when a reasoning budget is
    present, so standard mode leaves it unset instead of sending a zero budget.
    """
    generate_config = types.GenerateContentConfig(
        system_instruction=config["system_instruction"],
        safety_settings=DEFAULT_SAFETY_SETTINGS,
    )
    if "reasoning_budget" in config:
        generate_config.thinking_config = types.ThinkingConfig(
            thinking_budget=config["reasoning_budget"]
        )
    return generate_config


class GeminiChatSession(ChatSession):
    """Wraps a google-genai AsyncChat."""

    def __init__(self, chat: Any) -> None:
        self._chat = chat

    async def send_message(self, message: str) -> str:
        try:
            response = await self._chat.send_message(message)
        except errors.APIError as e:
            raise GatewayError(f"Gemini API error {e.code}: {e.message}") from e

        text = extract_text(response)
        if not text:
            raise EmptyResponseError("Gemini returned an empty reply")
        return text


class GeminiProvider(LLMProvider):
    """Google Gemini LLM provider implementation.

    Hidden design decisions:
    - Google GenAI client initialization
    - History and config conversion (thinking budget only in deep mode)
    - Relaxed safety settings
    - SDK error mapping onto GatewayError
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-3-pro-preview",
        **client_kwargs: Any
    ):
        """Initialize Gemini provider.

        Args:
            api_key: Google AI API key
            model: Default model (gemini-3-pro-preview, gemini-2.5-pro, gemini-2.5-flash)
            **client_kwargs: Additional kwargs for Client
        """
        self._model = model
        self._client = genai.Client(api_key=api_key, **client_kwargs)

    @property
    def model(self) -> str:
        return self._model

    async def create_session(
        self,
        history: list[HistoryTurn],
        config: dict[str, Any],
    ) -> GeminiChatSession:
        chat = self._client.aio.chats.create(
            model=self._model,
            config=to_generate_config(config),
            history=to_contents(history),
        )
        return GeminiChatSession(chat)

    async def close(self) -> None:
        """Close the Gemini client.

        Note: The Google GenAI client doesn't require explicit closing,
        but we implement this for interface consistency.
        """
        pass
