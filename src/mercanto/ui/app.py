"""Main Textual TUI application.

Orchestrates the UI components around a ConversationController.
"""

import asyncio
import logging

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Footer, Header, Switch

from ..charts import ChartRenderer
from ..conversation import ConversationController, Message
from .config import (
    CLEAR_CONFIRMATION_PROMPT,
    THEME_DARK,
    THEME_LIGHT,
    THEME_PREFERENCE_KEY,
    LogLevel,
)
from .log_handler import DebugPanelHandler
from .screens import ConfirmationScreen
from .styles import APP_CSS
from .themes import CATPPUCCIN_LATTE, CATPPUCCIN_MOCHA, THEME_NAMES
from .widgets import ChatHistoryWidget, ChatInputBar, DebugPanel, ErrorBanner, ModeBar

logger = logging.getLogger(__name__)

PACKAGE_LOGGER = "mercanto"


class MercantoApp(App):
    """Textual TUI for chatting with Mercanto."""

    CSS = APP_CSS
    TITLE = "Mercanto"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit", priority=True),
        Binding("ctrl+k", "clear_history", "Clear History", priority=True),
        Binding("ctrl+t", "toggle_theme", "Theme", priority=True),
        Binding("ctrl+r", "copy_last_response", "Copy Response"),
        Binding("ctrl+d", "toggle_debug", "Debug", priority=True),
    ]

    def __init__(
        self,
        controller: ConversationController,
        renderer: ChartRenderer,
        theme_name: str | None = None,
        log_level: str | None = None,
    ) -> None:
        super().__init__()
        self._controller = controller
        self._renderer = renderer
        self._requested_theme = theme_name
        self._theme_name = theme_name or THEME_DARK
        self._log_level = log_level
        self._log_handler: DebugPanelHandler | None = None
        self._previous_log_level = logging.NOTSET

    @property
    def controller(self) -> ConversationController:
        return self._controller

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield ChatHistoryWidget(self._renderer, self._theme_name, id="chat-history")
        yield ErrorBanner(id="error-banner")
        yield DebugPanel(id="debug-panel")
        with Vertical(id="bottom-bar"):
            yield ModeBar(self._controller.deep_thinking, id="mode-bar")
            yield ChatInputBar(id="chat-input-bar")
        yield Footer()

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self.register_theme(CATPPUCCIN_MOCHA)
        self.register_theme(CATPPUCCIN_LATTE)
        self.theme = THEME_NAMES[self._theme_name]

        log_panel = self.query_one("#debug-panel", DebugPanel)
        self._log_handler = DebugPanelHandler(log_panel)
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        package_logger.addHandler(self._log_handler)
        self._previous_log_level = package_logger.level
        package_logger.setLevel(logging.DEBUG)
        if self._log_level is not None:
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
            log_panel.info("TUI", f"Log panel enabled with level: {self._log_level.upper()}")
        else:
            log_panel.log_level = LogLevel.INFO

        self._update_subtitle()
        self._controller.store.set_listener(self._on_conversation_changed)
        self._start()

    def on_unmount(self) -> None:
        """Clean up resources when app exits."""
        self._controller.store.set_listener(None)
        self._renderer.release_all()
        if self._log_handler is not None:
            package_logger = logging.getLogger(PACKAGE_LOGGER)
            package_logger.removeHandler(self._log_handler)
            package_logger.setLevel(self._previous_log_level)
            self._log_handler = None

    def _update_subtitle(self) -> None:
        mode = "deep thinking" if self._controller.deep_thinking else "standard"
        backend = self._controller.store.backend.backend_type
        self.sub_title = f"{self._controller.gateway.model_name} | {mode} | {backend}"

    def _on_conversation_changed(self, messages: list[Message]) -> None:
        self.query_one("#chat-history", ChatHistoryWidget).sync(messages)

    def _set_busy(self, busy: bool) -> None:
        self.query_one("#chat-input-bar", ChatInputBar).set_busy(busy)

    def _show_error(self) -> None:
        self.query_one("#error-banner", ErrorBanner).show_error(self._controller.error)

    @work(exclusive=True, group="conversation")
    async def _start(self) -> None:
        """Restore preferences and the conversation, bootstrapping if needed."""
        self._set_busy(True)
        try:
            if self._requested_theme is None:
                await self._restore_theme()
            await self._controller.start()
        finally:
            self._set_busy(False)
            self._show_error()

    async def _restore_theme(self) -> None:
        try:
            saved = await self._controller.store.backend.get(THEME_PREFERENCE_KEY)
        except Exception as e:
            logger.warning("Failed to read theme preference: %s", e)
            return
        if saved in THEME_NAMES and saved != self._theme_name:
            self._apply_theme(saved)

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        """Handle user input submission."""
        if self._controller.busy:
            self.notify("Please wait for the current reply", severity="warning", timeout=2)
            return
        self._run_turn(event.value)

    @work(exclusive=True, group="conversation")
    async def _run_turn(self, user_input: str) -> None:
        self._set_busy(True)
        try:
            await self._controller.submit(user_input)
        finally:
            self._set_busy(False)
            self._show_error()
        if self._controller.error:
            self.notify(self._controller.error, severity="error", timeout=5)

    def on_switch_changed(self, event: Switch.Changed) -> None:
        """Toggle Deep Thinking mode."""
        if event.switch.id != "mode-switch":
            return
        self._controller.deep_thinking = event.value
        self.query_one("#mode-bar", ModeBar).set_mode(event.value)
        self._update_subtitle()

    def action_clear_history(self) -> None:
        """Ask for confirmation, then clear the conversation."""
        if isinstance(self.screen, ConfirmationScreen):
            return
        if self._controller.busy:
            self.notify("Please wait for the current reply", severity="warning", timeout=2)
            return

        def _on_answer(confirmed: bool | None) -> None:
            if confirmed:
                self._reset()

        self.push_screen(
            ConfirmationScreen(CLEAR_CONFIRMATION_PROMPT, title="Clear History", confirm_label="Clear"),
            _on_answer,
        )

    @work(exclusive=True, group="conversation")
    async def _reset(self) -> None:
        self._set_busy(True)
        try:
            await self._controller.reset()
        finally:
            self._set_busy(False)
            self._show_error()
        self.notify("History cleared", timeout=2)

    def action_toggle_theme(self) -> None:
        """Switch between light and dark, re-rendering charts."""
        new_theme = THEME_LIGHT if self._theme_name == THEME_DARK else THEME_DARK
        self._apply_theme(new_theme)
        self._save_theme(new_theme)

    def _apply_theme(self, theme_name: str) -> None:
        self._theme_name = theme_name
        self.theme = THEME_NAMES[theme_name]
        self.query_one("#chat-history", ChatHistoryWidget).set_theme(theme_name)

    @work(group="preferences")
    async def _save_theme(self, theme_name: str) -> None:
        try:
            await self._controller.store.backend.set(THEME_PREFERENCE_KEY, theme_name)
        except Exception as e:
            logger.warning("Failed to save theme preference: %s", e)

    def action_toggle_debug(self) -> None:
        """Toggle the log panel visibility."""
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)

    def action_copy_last_response(self) -> None:
        """Copy last model response to clipboard."""
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        response = chat.get_last_response()
        if response:
            self.copy_to_clipboard(response)
            self.notify("Response copied")
        else:
            self.notify("No response to copy", severity="warning")


async def run_textual_tui(
    controller: ConversationController,
    renderer: ChartRenderer,
    theme_name: str | None = None,
    log_level: str | None = None,
) -> None:
    """Run the Textual TUI.

    Args:
        controller: Conversation controller wired to a store and gateway
        renderer: Chart renderer for model replies
        theme_name: "light" or "dark"; None restores the saved preference
        log_level: Log level for panel (debug/info/warning/error), None to hide
    """
    app = MercantoApp(
        controller=controller,
        renderer=renderer,
        theme_name=theme_name,
        log_level=log_level,
    )
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        await controller.store.backend.disconnect()
        await controller.gateway.close()
