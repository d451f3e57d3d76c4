"""Terminal UI module for mercanto.

Provides a Textual-based TUI for the Mercanto conversation.

Module structure (each module hides a design decision):
- config.py: UI constants and log levels
- formatting.py: inline markup to Rich markup transform
- widgets.py: Custom widgets (message bubbles, charts, input, mode bar, log)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palettes and theme configuration
- screens.py: Modal dialogs (confirmation screens)
- log_handler.py: Bridge from stdlib logging to the log panel
- app.py: Application orchestration (user interaction flow)
"""

from .app import MercantoApp, run_textual_tui
from .config import LogLevel
from .formatting import render_message_text, to_markup
from .log_handler import DebugPanelHandler
from .widgets import (
    ChartView,
    ChatHistoryWidget,
    ChatInputBar,
    DebugPanel,
    ErrorBanner,
    MessageBubble,
    ModeBar,
)

__all__ = [
    "ChartView",
    "ChatHistoryWidget",
    "ChatInputBar",
    "DebugPanel",
    "DebugPanelHandler",
    "ErrorBanner",
    "LogLevel",
    "MercantoApp",
    "MessageBubble",
    "ModeBar",
    "render_message_text",
    "run_textual_tui",
    "to_markup",
]
