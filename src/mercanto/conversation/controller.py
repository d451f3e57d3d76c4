"""Conversation controller.

Orchestrates user turns, the bootstrap turn and resets between the store
and the gateway. The controller is the only component that initiates
writes; it runs at most one turn at a time.
"""

import logging

from ..llm import GatewayError
from .gateway import ModelGateway
from .models import Message
from .store import ConversationStore

logger = logging.getLogger(__name__)

DEEP_THINKING_HINT = "Analyzing market trends and strategy..."
TURN_ERROR_MESSAGE = "I encountered an issue processing your request. Please try again."
BOOTSTRAP_ERROR_MESSAGE = "Failed to initialize Mercanto. Please check your connection."


class ConversationController:
    """Drives the conversation in Standard or Deep-Thinking mode.

    Example:
        controller = ConversationController(store, gateway)
        await controller.start()
        await controller.submit("Compare conversion rates")
    """

    def __init__(
        self,
        store: ConversationStore,
        gateway: ModelGateway,
        deep_thinking: bool = False,
    ) -> None:
        self._store = store
        self._gateway = gateway
        self._deep_thinking = deep_thinking
        self._busy = False
        self._error: str | None = None

    @property
    def store(self) -> ConversationStore:
        return self._store

    @property
    def gateway(self) -> ModelGateway:
        return self._gateway

    @property
    def messages(self) -> list[Message]:
        return self._store.messages

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def error(self) -> str | None:
        """Advisory text for the caller to show, or None."""
        return self._error

    @property
    def deep_thinking(self) -> bool:
        return self._deep_thinking

    @deep_thinking.setter
    def deep_thinking(self, enabled: bool) -> None:
        self._deep_thinking = enabled
        logger.info("Mode: %s", "deep thinking" if enabled else "standard")

    async def start(self) -> None:
        """Restore the conversation, bootstrapping only if nothing was restored."""
        result = await self._store.load()
        if result.needs_bootstrap:
            await self.bootstrap()

    async def bootstrap(self) -> None:
        """Seed an empty conversation with the model's introduction."""
        self._busy = True
        self._error = None
        try:
            reply = await self._gateway.bootstrap()
            await self._store.append([Message.model(reply)])
        except GatewayError as e:
            logger.error("Bootstrap failed: %s", e)
            self._error = BOOTSTRAP_ERROR_MESSAGE
        finally:
            self._busy = False

    async def submit(self, user_input: str) -> bool:
        """Run one user turn.

        Returns:
            False if the input was rejected (blank, or a turn is in flight)
        """
        if not user_input.strip():
            return False
        if self._busy:
            logger.warning("Rejected input while a turn is in flight")
            return False

        history = self._store.messages
        deep_thinking = self._deep_thinking
        placeholder = Message.placeholder(DEEP_THINKING_HINT if deep_thinking else "")

        self._busy = True
        self._error = None
        try:
            await self._store.append([Message.user(user_input), placeholder])
            reply = await self._gateway.send_turn(user_input, history, deep_thinking)
            await self._store.replace_pending(Message.model(reply))
        except Exception as e:
            logger.error("Turn failed: %s", e)
            self._error = TURN_ERROR_MESSAGE
            await self._store.replace_pending(Message.model(TURN_ERROR_MESSAGE))
        finally:
            self._busy = False
        return True

    async def reset(self) -> None:
        """Forget everything and start over with a fresh introduction.

        Callers are responsible for confirming with the user first.
        """
        await self._store.clear()
        self._gateway.reset_session()
        self._error = None
        await self.bootstrap()
