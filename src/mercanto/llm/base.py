from abc import ABC, abstractmethod
from typing import Any

from .models import HistoryTurn


class ChatSession(ABC):
    """A remote conversational context seeded with history.

    A session is cheap to create and carries the system instruction,
    the optional reasoning budget and the prior turns it was built from.
    """

    @abstractmethod
    async def send_message(self, message: str) -> str:
        """Send the newest user turn and return the model's reply text.

        Args:
            message: User input for this turn

        Returns:
            Reply text

        Raises:
            GatewayError: On transport or API failure, or an empty reply
        """
        pass


class LLMProvider(ABC):
    """Abstract base class for LLM providers.

    This module hides the design decision of which remote model is used.
    Implementations must handle provider-specific details like:
    - API client setup and authentication
    - History and configuration format conversion
    - Mapping SDK errors onto GatewayError

    Supports async context manager protocol for proper resource cleanup:
        async with provider:
            session = await provider.create_session(history, config)
        # Automatically cleaned up
    """

    @property
    @abstractmethod
    def model(self) -> str:
        """Get the default model name."""

    @abstractmethod
    async def create_session(
        self,
        history: list[HistoryTurn],
        config: dict[str, Any],
    ) -> ChatSession:
        """Open a new chat session.

        Args:
            history: Prior turns, oldest first
            config: Session configuration. Recognised keys:
                - system_instruction: str (required)
                - reasoning_budget: int (optional; absent means standard mode)

        Returns:
            A fresh ChatSession

        Raises:
            GatewayError: If the session cannot be created
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""
        pass

    async def __aenter__(self) -> "LLMProvider":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
