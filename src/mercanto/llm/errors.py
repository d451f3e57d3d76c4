"""Error types raised by LLM providers and the model gateway."""


class LLMError(Exception):
    """Base exception for remote model failures."""


class GatewayError(LLMError):
    """The remote model could not produce a reply.

    Wraps transport failures, API errors (4xx/5xx) and timeouts so callers
    only ever need to handle one exception type.
    """


class EmptyResponseError(GatewayError):
    """The remote model answered but the reply carried no text.

    Gemini does this when a candidate is blocked by safety filtering.
    """
