from typing import Any

from .base import LLMProvider
from .providers import GeminiProvider


def create_llm_provider(provider: str, **config: Any) -> LLMProvider:
    """Create an LLM provider instance.

    This factory function hides the instantiation logic for different providers.

    Args:
        provider: Provider type ('gemini')
        **config: Provider-specific configuration
            For Gemini:
                - api_key: str (required)
                - model: str (default: 'gemini-3-pro-preview')

    Returns:
        Initialized LLM provider instance

    Raises:
        ValueError: If provider type is not supported
        TypeError: If required configuration is missing

    Examples:
        >>> provider = create_llm_provider(
        ...     "gemini",
        ...     api_key="...",
        ...     model="gemini-2.5-flash"
        ... )
    """
    provider_lower = provider.lower()

    if provider_lower in ("gemini", "google"):
        if "api_key" not in config:
            raise TypeError("Gemini provider requires 'api_key' in config")
        return GeminiProvider(**config)

    raise ValueError(
        f"Unsupported provider: {provider}. "
        f"Supported providers: 'gemini'"
    )
