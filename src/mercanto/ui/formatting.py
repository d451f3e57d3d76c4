"""Text formatting utilities for the TUI.

Hides the details of turning model text into Rich console markup.
"""

import re

from rich.markup import escape
from rich.text import Text

CODE_BLOCK_STYLE = "bright_white on grey15"
INLINE_CODE_STYLE = "bold cyan"
BOLD_STYLE = "bold"
ITALIC_STYLE = "italic"

_CODE_FENCE = re.compile(r"```(?:[\w-]*\n)?(.*?)```", re.DOTALL)
_INLINE_CODE = re.compile(r"`([^`\n]+)`")
_BOLD = re.compile(r"\*\*(.+?)\*\*")
_ITALIC = re.compile(r"(?<!\*)\*(?![\s*])([^*\n]+?)\*(?!\*)")
_STASHED = re.compile("\x00(\\d+)\x00")


def to_markup(text: str) -> str:
    """Convert model text to Rich markup.

    Substitution order: code fences, inline code, bold, italic. Code is
    stashed before emphasis runs so asterisks inside code stay literal.
    Everything else is escaped, so brackets in the text never become tags.
    """
    stash: list[str] = []

    def _keep(markup: str) -> str:
        stash.append(markup)
        return f"\x00{len(stash) - 1}\x00"

    out = escape(text)
    out = _CODE_FENCE.sub(
        lambda m: _keep(f"[{CODE_BLOCK_STYLE}]{m.group(1).rstrip(chr(10))}[/]"), out
    )
    out = _INLINE_CODE.sub(lambda m: _keep(f"[{INLINE_CODE_STYLE}]{m.group(1)}[/]"), out)
    out = _BOLD.sub(rf"[{BOLD_STYLE}]\1[/]", out)
    out = _ITALIC.sub(rf"[{ITALIC_STYLE}]\1[/]", out)
    return _STASHED.sub(lambda m: stash[int(m.group(1))], out)


def render_message_text(text: str) -> Text:
    """Render model text as a Rich Text with wrapping.

    Falls back to plain text if markup parsing fails.
    """
    try:
        return Text.from_markup(to_markup(text), overflow="fold")
    except Exception:
        return Text(text, overflow="fold")
