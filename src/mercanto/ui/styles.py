"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Uses Textual CSS features: nesting, pseudo-classes, variables.
All colours come from theme variables so light and dark themes share
one stylesheet.
"""

APP_CSS = """
/* ============================================
   Main Screen Layout - single column
   ============================================ */
Screen {
    layout: vertical;
    background: $background;
}

/* ============================================
   Chat History Panel
   ============================================ */
#chat-history {
    height: 1fr;
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;

    &:focus-within {
        border: round $primary;
    }
}

/* ============================================
   Chat Messages
   ============================================ */
.chat-message {
    width: 100%;
    height: auto;
    margin: 0 0 1 0;
    padding: 1 2;
    background: transparent;
}

.user-message {
    border-left: tall $success;
    background: $success 8%;

    & .message-header {
        color: $success;
        text-style: bold;
    }
}

.assistant-message {
    border-left: tall $secondary;
    background: $secondary 8%;

    & .message-header {
        color: $secondary;
        text-style: bold;
    }

    &:hover {
        background: $secondary 12%;
        border-left: tall $secondary-lighten-1;
    }
}

.assistant-message.typing {
    border-left: tall $primary;

    & .typing-indicator {
        color: $primary;
    }
}

.message-header {
    height: auto;
}

.message-content {
    height: auto;
    color: $foreground;
}

/* ============================================
   Chart View
   ============================================ */
.chart-view {
    height: auto;
    margin: 1 0 0 0;
    padding: 0 1;
    border: round $border;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    background: $surface;
}

.chart-image {
    width: auto;
    height: 18;
}

/* ============================================
   Error Banner
   ============================================ */
#error-banner {
    height: auto;
    margin: 0 1;
    padding: 0 2;
    text-align: center;
    color: $error;
    background: $error 12%;
    border: round $error;
}

/* ============================================
   Log Panel
   ============================================ */
#debug-panel {
    height: auto;
    min-height: 6;
    max-height: 12;
    background: $panel;
    border: round $warning 60%;
    border-title-color: $warning;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    overflow-y: scroll;
    overflow-x: auto;
}

/* ============================================
   Bottom Bar - Mode + Input
   ============================================ */
#bottom-bar {
    height: auto;
    padding: 0 1 1 1;
    background: $panel;
    border-top: solid $border;
}

ModeBar {
    height: 3;
    padding: 0 2;
    margin-bottom: 1;
    background: $surface;
    align: left middle;

    & #mode-label {
        width: 1fr;
        color: $text-muted;
        text-style: bold;
    }

    &.-deep #mode-label {
        color: $primary;
    }
}

ChatInputBar {
    height: 5;
    border: round $primary 60%;
    background: $panel;

    &:focus-within {
        border: round $primary;
    }
}

#chat-input {
    width: 1fr;
    height: 100%;
    border: none;
    padding: 0 1;
    background: transparent;

    &:disabled {
        opacity: 60%;
    }
}

#send-btn {
    width: 10;
    height: 100%;
    margin: 0 0 0 1;
    min-width: 8;
    border: tall $success;
    background: $success;
    color: $background;
    text-style: bold;

    &:hover {
        background: $success-lighten-1;
    }

    &:disabled {
        background: $surface;
        border: tall $border;
        color: $text-muted;
    }
}

/* ============================================
   Header / Footer
   ============================================ */
Header {
    background: $panel;
    color: $foreground;
    dock: top;
    height: 1;
}

HeaderTitle {
    color: $primary;
    text-style: bold;
}

Footer {
    background: $panel;
    height: auto;
}

Toast {
    background: $surface;
    border: tall $border;
    padding: 0 1;

    &.-information {
        border: tall $primary;
    }

    &.-error {
        border: tall $error;
    }

    &.-warning {
        border: tall $warning;
    }
}
"""
