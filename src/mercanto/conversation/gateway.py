"""Model gateway.

Owns the remote chat session. Every outbound turn rebuilds the session from
the full visible history plus the mode flag, so a conversation restored after
a restart resumes with the same context as one that never stopped.
"""

import logging
from enum import Enum
from typing import Any

from ..llm import ChatSession, GatewayError, HistoryTurn, LLMProvider
from ..prompts import get_bootstrap_prompt, get_system_instruction
from .models import Message, MessageRole

logger = logging.getLogger(__name__)

THINKING_BUDGET = 32768

FALLBACK_MESSAGE = (
    "I encountered an error analyzing your data. This might be due to a complex "
    "query or a connection issue. Please try again."
)


class SessionState(str, Enum):
    ABSENT = "absent"
    ACTIVE = "active"


def build_session_config(deep_thinking: bool) -> dict[str, Any]:
    """Build the remote session configuration.

    Standard mode omits the reasoning budget entirely; it is never sent
    as zero.
    """
    config: dict[str, Any] = {"system_instruction": get_system_instruction()}
    if deep_thinking:
        config["reasoning_budget"] = THINKING_BUDGET
    return config


def format_history(messages: list[Message]) -> list[HistoryTurn]:
    """Convert visible messages to role-tagged turns.

    Placeholders and empty messages carry nothing the model needs and are
    skipped.
    """
    return [
        HistoryTurn(
            role="user" if m.role == MessageRole.USER else "model",
            text=m.content,
        )
        for m in messages
        if not m.is_typing and m.content
    ]


class ModelGateway:
    """Sends turns to the remote model and absorbs its failures.

    Session lifecycle: ABSENT --send_turn/bootstrap--> ACTIVE
    --reset_session--> ABSENT. Each call replaces the session rather than
    reusing it.
    """

    def __init__(self, llm: LLMProvider) -> None:
        self._llm = llm
        self._session: ChatSession | None = None

    @property
    def state(self) -> SessionState:
        return SessionState.ACTIVE if self._session is not None else SessionState.ABSENT

    @property
    def model_name(self) -> str:
        return self._llm.model

    async def bootstrap(self) -> str:
        """Send the introduction turn with empty history.

        Raises:
            GatewayError: If the remote model cannot produce a reply
        """
        return await self._exchange(get_bootstrap_prompt(), [], deep_thinking=False)

    async def send_turn(
        self,
        user_input: str,
        history: list[Message],
        deep_thinking: bool = False,
    ) -> str:
        """Send one user turn and return the reply.

        Any failure is logged and answered with FALLBACK_MESSAGE.
        """
        try:
            return await self._exchange(user_input, history, deep_thinking)
        except Exception as e:
            logger.error("Error sending message to Gemini: %s", e)
            return FALLBACK_MESSAGE

    def reset_session(self) -> None:
        """Discard the session; the next turn starts from scratch."""
        self._session = None
        logger.debug("Session reset")

    async def close(self) -> None:
        """Drop the session and release the provider's connections."""
        self._session = None
        await self._llm.close()

    async def _exchange(
        self,
        message: str,
        history: list[Message],
        deep_thinking: bool,
    ) -> str:
        turns = format_history(history)
        config = build_session_config(deep_thinking)
        logger.debug(
            "Opening session: %d turn(s), deep_thinking=%s", len(turns), deep_thinking
        )
        try:
            self._session = await self._llm.create_session(turns, config)
            return await self._session.send_message(message)
        except GatewayError:
            raise
        except Exception as e:
            raise GatewayError(str(e) or type(e).__name__) from e
