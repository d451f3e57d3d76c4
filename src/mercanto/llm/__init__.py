from .base import ChatSession, LLMProvider
from .errors import EmptyResponseError, GatewayError, LLMError
from .factory import create_llm_provider
from .models import HistoryTurn
from .providers import GeminiProvider

__all__ = [
    "ChatSession",
    "LLMProvider",
    "create_llm_provider",
    "EmptyResponseError",
    "GatewayError",
    "LLMError",
    "HistoryTurn",
    "GeminiProvider",
]
