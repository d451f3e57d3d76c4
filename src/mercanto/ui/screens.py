"""Modal screens for the TUI.

This module hides the design decisions about:
- Confirmation dialog appearance (CSS, layout)
- Keyboard shortcuts for dialogs

To change how confirmations look, modify only this file.
"""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Grid
from textual.screen import ModalScreen
from textual.widgets import Button, Label


class ConfirmationScreen(ModalScreen[bool]):
    """Modal dialog guarding a destructive action.

    Dismisses with True when the user confirms, False otherwise.
    """

    DEFAULT_CSS = """
    ConfirmationScreen {
        align: center middle;
        background: $background 70%;
    }

    ConfirmationScreen > Grid {
        grid-size: 2;
        grid-gutter: 1 2;
        grid-rows: auto auto 3;
        width: 56;
        height: auto;
        padding: 1 2;
        border: thick $error 80%;
        background: $surface;
    }

    ConfirmationScreen #confirm-title {
        column-span: 2;
        width: 100%;
        content-align: center middle;
        text-style: bold;
        color: $error;
    }

    ConfirmationScreen #confirm-prompt {
        column-span: 2;
        width: 100%;
        content-align: center middle;
        color: $foreground;
    }

    ConfirmationScreen Button {
        width: 100%;
    }
    """

    BINDINGS = [
        Binding("y", "answer(True)", "Yes", show=False),
        Binding("n", "answer(False)", "No", show=False),
        Binding("escape", "answer(False)", "Cancel", show=False),
    ]

    def __init__(
        self,
        prompt: str,
        title: str = "Confirmation Required",
        confirm_label: str = "Yes",
    ) -> None:
        super().__init__()
        self._prompt = prompt
        self._title = title
        self._confirm_label = confirm_label

    def compose(self) -> ComposeResult:
        with Grid():
            yield Label(self._title, id="confirm-title")
            yield Label(self._prompt, id="confirm-prompt")
            yield Button(f"{self._confirm_label} (y)", id="confirm", variant="error")
            yield Button("Cancel (n)", id="cancel", variant="primary")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "confirm")

    def action_answer(self, confirmed: bool) -> None:
        self.dismiss(confirmed)
