"""Bridge from the logging module to the TUI log panel."""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .widgets import DebugPanel


class DebugPanelHandler(logging.Handler):
    """Forwards log records to a DebugPanel.

    The component shown in the panel is the last part of the logger name
    (e.g. "gateway" for mercanto.conversation.gateway).
    """

    def __init__(self, panel: "DebugPanel", level: int = logging.DEBUG) -> None:
        super().__init__(level)
        self._panel = panel

    def emit(self, record: logging.LogRecord) -> None:
        try:
            component = record.name.rsplit(".", 1)[-1]
            self._panel.add_entry(component, record.getMessage(), record.levelno)
        except Exception:
            self.handleError(record)
