"""UI configuration constants.

Centralizes magic numbers and configuration values for the UI module.
"""


class LogLevel:
    """Log level constants with numeric values for comparison.

    Values match the standard logging module, so a LogRecord's levelno
    can be compared directly.
    Lower numeric value = more verbose (shows more messages).
    """

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    _names = {
        DEBUG: "DEBUG",
        INFO: "INFO",
        WARNING: "WARNING",
        ERROR: "ERROR",
    }

    _from_string = {
        "debug": DEBUG,
        "info": INFO,
        "warning": WARNING,
        "error": ERROR,
    }

    @classmethod
    def name(cls, level: int) -> str:
        """Get the name for a log level."""
        if level > cls.ERROR:
            return "ERROR"
        return cls._names.get(level, "UNKNOWN")

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Convert string to log level. Returns DEBUG if invalid."""
        return cls._from_string.get(level_str.lower(), cls.DEBUG)


# Theme names as exposed to users, and the key the preference is stored under
THEME_DARK = "dark"
THEME_LIGHT = "light"
THEME_PREFERENCE_KEY = "mercanto_theme"

# Input history configuration
INPUT_HISTORY_MAX_SIZE = 100

# Log panel configuration
LOG_TIMESTAMP_FORMAT = "%H:%M:%S"
LOG_MAX_MESSAGE_LENGTH = 500

# Chart image size (inches at CHART_DPI)
CHART_WIDTH = 8.0
CHART_HEIGHT = 4.0
CHART_DPI = 100

# Mode bar labels
MODE_LABEL_DEEP = "Deep Thinking Mode (Strategy)"
MODE_LABEL_STANDARD = "Standard Mode (Speed)"

CLEAR_CONFIRMATION_PROMPT = "Clear all chat history? This cannot be undone."
