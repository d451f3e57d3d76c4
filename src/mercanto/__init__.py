"""
Mercanto: a conversational commerce analytics assistant for the terminal.

Each subpackage hides one design decision: the chat protocol with the
remote model (llm), the conversation lifecycle (conversation), chart
payloads and their rendering (charts), and local persistence (memory).
"""

__version__ = "0.1.0"

from .charts import ChartKind, ChartSeries, ChartSpec, extract
from .conversation import (
    ConversationController,
    ConversationStore,
    Message,
    MessageRole,
    ModelGateway,
)

__all__ = [
    "ChartKind",
    "ChartSeries",
    "ChartSpec",
    "ConversationController",
    "ConversationStore",
    "Message",
    "MessageRole",
    "ModelGateway",
    "extract",
]
