"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Message bubble rendering (typing indicator, markup, charts)
- Keeping the chat view in step with the conversation
- Input history and busy state
- Mode toggle and error banner
- Log rendering and level filtering
"""

from datetime import datetime
from itertools import count

from rich.markup import escape
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import Click
from textual.message import Message as TextualMessage
from textual.widgets import Button, RichLog, Static, Switch, TextArea
from textual_image.widget import Image as TextualImageWidget

from ..charts import ChartRenderer, ChartSpec, extract
from ..conversation import Message, MessageRole
from .config import (
    INPUT_HISTORY_MAX_SIZE,
    LOG_MAX_MESSAGE_LENGTH,
    LOG_TIMESTAMP_FORMAT,
    MODE_LABEL_DEEP,
    MODE_LABEL_STANDARD,
    LogLevel,
)
from .formatting import render_message_text

_slot_ids = count(1)


class ChartView(Vertical):
    """Displays one rendered chart.

    Owns a renderer slot: re-rendering (e.g. on a theme change) replaces
    the previous figure, and unmounting releases it.
    """

    def __init__(
        self,
        spec: ChartSpec,
        renderer: ChartRenderer,
        theme: str,
        slot: str,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._spec = spec
        self._renderer = renderer
        self._theme = theme
        self._slot = slot
        self._image = TextualImageWidget(None, classes="chart-image")

    @property
    def slot(self) -> str:
        return self._slot

    def compose(self) -> ComposeResult:
        yield self._image

    def on_mount(self) -> None:
        self.render_chart(self._theme)

    def render_chart(self, theme: str) -> None:
        """Render (or re-render) the chart with the given theme."""
        self._theme = theme
        try:
            path = self._renderer.render(self._spec, theme=theme, slot=self._slot)
        except Exception as e:
            self.border_subtitle = f"Chart error: {e}"
            return
        self._image.image = path
        self.border_subtitle = self._spec.title

    def on_unmount(self) -> None:
        self._renderer.release(self._slot)


class MessageBubble(Vertical):
    """A single chat message.

    Placeholders show a typing indicator with the optional hint text.
    Model replies are split into display text and an optional chart.
    Clicking a model reply copies its raw content.
    """

    def __init__(
        self,
        message: Message,
        renderer: ChartRenderer,
        theme: str,
        index: int,
        **kwargs,
    ) -> None:
        is_user = message.role == MessageRole.USER
        classes = "chat-message " + ("user-message" if is_user else "assistant-message")
        if message.is_typing:
            classes += " typing"
        super().__init__(classes=classes, **kwargs)
        self._message = message
        self._renderer = renderer
        self._theme = theme
        self._index = index
        self._created = datetime.now()

    @property
    def message(self) -> Message:
        return self._message

    def compose(self) -> ComposeResult:
        msg = self._message
        if msg.role == MessageRole.USER:
            header = f"> You [{self._created.strftime('%H:%M:%S')}]"
        else:
            header = f"< Mercanto [{self._created.strftime('%H:%M:%S')}]"
        yield Static(header, classes="message-header")

        if msg.is_typing:
            text = "[bold]. . .[/]"
            if msg.content:
                text += f"  [italic]{escape(msg.content.upper())}[/]"
            yield Static(text, classes="typing-indicator")
            return

        if msg.role == MessageRole.USER:
            yield Static(msg.content, markup=False, classes="message-content")
            return

        extracted = extract(msg.content)
        yield Static(render_message_text(extracted.display_text), classes="message-content")
        if extracted.chart is not None:
            yield ChartView(
                extracted.chart,
                self._renderer,
                self._theme,
                slot=f"message-{self._index}-{next(_slot_ids)}",
                classes="chart-view",
            )

    def on_click(self, event: Click) -> None:
        """Copy a model reply to the clipboard."""
        event.stop()
        if self._message.role != MessageRole.MODEL or self._message.is_typing:
            return
        if not self._message.content:
            return
        self.app.copy_to_clipboard(self._message.content)
        self.app.notify("Copied to clipboard", timeout=2)


class ChatHistoryWidget(VerticalScroll):
    """Scrollable chat history mirroring the conversation."""

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "Conversation history"
    ALLOW_MAXIMIZE = True

    def __init__(self, renderer: ChartRenderer, theme: str, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._renderer = renderer
        self._theme = theme
        self._messages: list[Message] = []
        self._bubbles: list[MessageBubble] = []

    def sync(self, messages: list[Message]) -> None:
        """Update the view to show messages.

        Bubbles for the unchanged prefix are kept; everything after it is
        replaced. Conversations only grow at the tail, lose their tail
        placeholder, or are cleared, so the prefix is nearly everything.
        """
        keep = 0
        for old, new in zip(self._messages, messages, strict=False):
            if old != new:
                break
            keep += 1

        for bubble in self._bubbles[keep:]:
            bubble.remove()
        self._bubbles = self._bubbles[:keep]

        new_bubbles = [
            MessageBubble(message, self._renderer, self._theme, index=keep + i)
            for i, message in enumerate(messages[keep:])
        ]
        if new_bubbles:
            self.mount_all(new_bubbles)
        self._bubbles.extend(new_bubbles)
        self._messages = list(messages)

        self.border_subtitle = f"{len(messages)} messages" if messages else "Conversation history"
        self.scroll_end(animate=False)

    def set_theme(self, theme: str) -> None:
        """Re-render every chart for the new theme."""
        self._theme = theme
        for chart_view in self.query(ChartView):
            chart_view.render_chart(theme)

    def get_last_response(self) -> str | None:
        """Get the last finished model response."""
        for msg in reversed(self._messages):
            if msg.role == MessageRole.MODEL and not msg.is_typing:
                return msg.content
        return None


class ChatInputBar(Horizontal):
    """Chat input bar with TextArea and Send button."""

    class Submitted(TextualMessage):
        """Message sent when user submits input."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._history: list[str] = []
        self._history_index: int = -1
        self._busy = False

    def compose(self) -> ComposeResult:
        text_area = TextArea(id="chat-input", show_line_numbers=False)
        text_area.cursor_blink = False
        yield text_area
        yield Button("Send", id="send-btn", variant="success").with_tooltip(
            "Submit message (Ctrl+J)"
        )

    def on_mount(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        text_area.focus()
        text_area.highlight_cursor_line = False

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            self._submit()

    def on_key(self, event) -> None:
        """Handle keyboard shortcuts.

        Note: ctrl+enter cannot work in terminals (terminal doesn't pass
        ctrl/shift modifiers with Enter). Use ctrl+j as the submit shortcut.
        """
        if event.key == "ctrl+j":
            self._submit()
            event.prevent_default()
            event.stop()
        elif event.key == "up" and self._is_cursor_at_start():
            self._navigate_history(-1)
            event.prevent_default()
            event.stop()
        elif event.key == "down" and self._is_cursor_at_end():
            self._navigate_history(1)
            event.prevent_default()
            event.stop()

    def _is_cursor_at_start(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        return text_area.cursor_location == (0, 0)

    def _is_cursor_at_end(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        lines = text_area.text.split("\n")
        last_row = len(lines) - 1
        last_col = len(lines[-1]) if lines else 0
        return text_area.cursor_location == (last_row, last_col)

    def _navigate_history(self, direction: int) -> None:
        if not self._history:
            return
        text_area = self.query_one("#chat-input", TextArea)
        if direction < 0:
            if self._history_index == -1:
                self._history_index = len(self._history) - 1
            elif self._history_index > 0:
                self._history_index -= 1
        else:
            if self._history_index < len(self._history) - 1:
                self._history_index += 1
            else:
                self._history_index = -1
                text_area.text = ""
                return
        text_area.text = self._history[self._history_index]

    def _submit(self) -> None:
        if self._busy:
            return
        text_area = self.query_one("#chat-input", TextArea)
        value = text_area.text.strip()
        if value:
            if not self._history or self._history[-1] != value:
                self._history.append(value)
                del self._history[:-INPUT_HISTORY_MAX_SIZE]
            self._history_index = -1
            text_area.text = ""
            self.post_message(self.Submitted(value))

    def set_busy(self, busy: bool) -> None:
        """Disable input while a turn is in flight."""
        self._busy = busy
        self.query_one("#chat-input", TextArea).disabled = busy
        button = self.query_one("#send-btn", Button)
        button.disabled = busy
        button.label = "..." if busy else "Send"
        if not busy:
            self.focus_input()

    def focus_input(self) -> None:
        """Focus the text input."""
        self.query_one("#chat-input", TextArea).focus()


class ModeBar(Horizontal):
    """Shows the current mode and the Deep Thinking switch."""

    def __init__(self, deep_thinking: bool = False, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._deep_thinking = deep_thinking

    def compose(self) -> ComposeResult:
        yield Static(self._label(), id="mode-label")
        yield Switch(value=self._deep_thinking, id="mode-switch")

    def _label(self) -> str:
        if self._deep_thinking:
            return f"[bold]●[/] {MODE_LABEL_DEEP}"
        return f"[dim]●[/] {MODE_LABEL_STANDARD}"

    def set_mode(self, deep_thinking: bool) -> None:
        self._deep_thinking = deep_thinking
        self.query_one("#mode-label", Static).update(self._label())
        self.set_class(deep_thinking, "-deep")


class ErrorBanner(Static):
    """Advisory banner for recoverable errors. Hidden when empty."""

    def on_mount(self) -> None:
        self.display = False

    def show_error(self, text: str | None) -> None:
        if text:
            self.update(text)
            self.display = True
        else:
            self.update("")
            self.display = False


class DebugPanel(RichLog):
    """Log panel for real-time tracing with level filtering.

    Shows timestamped log records from all components.
    Supports standard log levels: DEBUG < INFO < WARNING < ERROR.
    Hidden by default, shown with --log-level flag or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Trace log"

    def __init__(self, *args, log_level: int = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=False,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        """Current log level threshold."""
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"

    def on_mount(self) -> None:
        """Hide by default."""
        self.display = False

    def add_entry(
        self,
        component: str,
        message: str,
        level: int = LogLevel.DEBUG
    ) -> None:
        """Add a log entry if it meets the current level threshold.

        Args:
            component: Component name (gateway, store, controller, ...)
            message: Log message
            level: Log level (LogLevel.DEBUG, INFO, WARNING, ERROR)
        """
        if level < self._log_level:
            return

        timestamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
        level_colors = {
            LogLevel.DEBUG: "dim white",
            LogLevel.INFO: "cyan",
            LogLevel.WARNING: "yellow",
            LogLevel.ERROR: "red",
        }
        level_color = level_colors.get(min(level, LogLevel.ERROR), "white")
        level_name = LogLevel.name(level)

        component_colors = {
            "TUI": "cyan",
            "controller": "green",
            "gateway": "magenta",
            "store": "bright_green",
            "sqlite": "blue",
            "extractor": "bright_yellow",
            "renderer": "bright_cyan",
        }
        comp_color = component_colors.get(component, "white")

        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "..."

        self.write(
            f"[dim]{timestamp}[/] "
            f"[{level_color}]{level_name:<5}[/] "
            f"[{comp_color}]\\[{component}][/] {escape(message)}"
        )

    def debug(self, component: str, message: str) -> None:
        self.add_entry(component, message, LogLevel.DEBUG)

    def info(self, component: str, message: str) -> None:
        self.add_entry(component, message, LogLevel.INFO)

    def warning(self, component: str, message: str) -> None:
        self.add_entry(component, message, LogLevel.WARNING)

    def error(self, component: str, message: str) -> None:
        self.add_entry(component, message, LogLevel.ERROR)

    def show(self) -> None:
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        self.display = False
        self.border_subtitle = "Hidden"

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True
