"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, scrollbars, etc.)
- Dark/light mode configuration

Both themes are registered at startup; THEME_NAMES maps the user-facing
"dark"/"light" names onto them.
"""

from textual.theme import Theme

from .config import THEME_DARK, THEME_LIGHT

# Catppuccin Mocha with a sky-blue primary to match the chart palette
CATPPUCCIN_MOCHA = Theme(
    name="mercanto-mocha",
    primary="#89dceb",      # Sky - main accent
    secondary="#cba6f7",    # Mauve - assistant messages
    accent="#f9e2af",       # Yellow - highlights
    foreground="#cdd6f4",
    background="#11111b",   # Crust
    success="#a6e3a1",
    warning="#fab387",
    error="#f38ba8",
    surface="#1e1e2e",      # Base
    panel="#181825",        # Mantle
    dark=True,
    variables={
        "block-cursor-foreground": "#11111b",
        "block-cursor-background": "#f5e0dc",
        "block-cursor-text-style": "bold",
        "input-cursor-background": "#cdd6f4",
        "input-cursor-foreground": "#11111b",
        "input-selection-background": "#89dceb 30%",
        "border": "#45475a",
        "border-blurred": "#313244",
        "scrollbar": "#313244",
        "scrollbar-hover": "#45475a",
        "scrollbar-active": "#89dceb",
        "scrollbar-background": "#181825",
        "footer-foreground": "#bac2de",
        "footer-background": "#11111b",
        "footer-key-foreground": "#f9e2af",
        "footer-key-background": "#313244",
        "text-muted": "#6c7086",
        "text-error": "#f38ba8",
    },
)

# Catppuccin Latte, the light counterpart
CATPPUCCIN_LATTE = Theme(
    name="mercanto-latte",
    primary="#04a5e5",      # Sky
    secondary="#8839ef",    # Mauve
    accent="#df8e1d",       # Yellow
    foreground="#4c4f69",
    background="#eff1f5",   # Base
    success="#40a02b",
    warning="#fe640b",
    error="#d20f39",
    surface="#e6e9ef",      # Mantle
    panel="#dce0e8",        # Crust
    dark=False,
    variables={
        "block-cursor-foreground": "#eff1f5",
        "block-cursor-background": "#dc8a78",
        "block-cursor-text-style": "bold",
        "input-cursor-background": "#4c4f69",
        "input-cursor-foreground": "#eff1f5",
        "input-selection-background": "#04a5e5 30%",
        "border": "#9ca0b0",
        "border-blurred": "#bcc0cc",
        "scrollbar": "#bcc0cc",
        "scrollbar-hover": "#9ca0b0",
        "scrollbar-active": "#04a5e5",
        "scrollbar-background": "#dce0e8",
        "footer-foreground": "#5c5f77",
        "footer-background": "#dce0e8",
        "footer-key-foreground": "#df8e1d",
        "footer-key-background": "#ccd0da",
        "text-muted": "#8c8fa1",
        "text-error": "#d20f39",
    },
)

THEME_NAMES = {
    THEME_DARK: CATPPUCCIN_MOCHA.name,
    THEME_LIGHT: CATPPUCCIN_LATTE.name,
}
