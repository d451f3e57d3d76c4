"""Prompt management module.

Externalizes prompts to text files for easy customization.
Prompts can be overridden by placing files in the working directory.
"""

from functools import lru_cache
from pathlib import Path

# Default prompts directory (package location)
_PROMPTS_DIR = Path(__file__).parent


@lru_cache(maxsize=16)
def load_prompt(name: str) -> str:
    """Load a prompt from file.

    Search order:
    1. Current working directory: ./prompts/{name}.txt
    2. Package prompts directory: mercanto/prompts/{name}.txt

    Args:
        name: Prompt name (without .txt extension)

    Returns:
        Prompt text content, without the trailing newline

    Raises:
        FileNotFoundError: If prompt file not found in any location
    """
    filename = f"{name}.txt"

    local_path = Path.cwd() / "prompts" / filename
    if local_path.exists():
        return local_path.read_text(encoding="utf-8").rstrip("\n")

    package_path = _PROMPTS_DIR / filename
    if package_path.exists():
        return package_path.read_text(encoding="utf-8").rstrip("\n")

    raise FileNotFoundError(
        f"Prompt '{name}' not found. Searched:\n"
        f"  - {local_path}\n"
        f"  - {package_path}"
    )


def get_system_instruction() -> str:
    """Get the system instruction every chat session is created with."""
    return load_prompt("system")


def get_bootstrap_prompt() -> str:
    """Get the introduction request sent when no history exists."""
    return load_prompt("bootstrap")


def clear_cache() -> None:
    """Clear the prompt cache (useful after modifying prompt files)."""
    load_prompt.cache_clear()


__all__ = [
    "load_prompt",
    "get_system_instruction",
    "get_bootstrap_prompt",
    "clear_cache",
]
