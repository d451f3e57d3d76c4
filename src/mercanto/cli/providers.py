"""Provider factory functions for CLI.

Centralizes creation of the LLM provider, the key-value store and the
conversation controller from environment variables. Hides configuration
details from command implementations.
"""

import os
from pathlib import Path
from typing import Any

import typer
from rich.console import Console

from ..charts import ChartRenderer
from ..conversation import ConversationController, ConversationStore, ModelGateway
from ..llm import LLMProvider, create_llm_provider
from ..memory import KeyValueStore, create_key_value_store
from ..ui.config import CHART_DPI, CHART_HEIGHT, CHART_WIDTH

DEFAULT_MODEL = "gemini-3-pro-preview"
DEFAULT_MEMORY_BACKEND = "sqlite"
DEFAULT_MEMORY_PATH = Path.home() / ".mercanto" / "store.db"

# Default console for output
_console = Console()


def get_api_key() -> str | None:
    """Read the Gemini API key.

    Environment variables:
        GEMINI_API_KEY: Gemini API key
        API_KEY: Fallback when GEMINI_API_KEY is unset
    """
    return os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")


def get_llm(console: Console | None = None) -> LLMProvider | None:
    """Create LLM provider from environment variables.

    Args:
        console: Optional Rich console for output

    Returns:
        LLM provider instance, or None if not configured

    Environment variables:
        GEMINI_API_KEY: Gemini API key (API_KEY is accepted as a fallback)
        GEMINI_MODEL: Gemini model (default: gemini-3-pro-preview)
    """
    con = console or _console
    api_key = get_api_key()
    if not api_key:
        con.print("[yellow]Warning: GEMINI_API_KEY not set[/yellow]")
        return None
    model = os.getenv("GEMINI_MODEL", DEFAULT_MODEL)
    return create_llm_provider("gemini", api_key=api_key, model=model)


def require_llm(console: Console | None = None) -> LLMProvider:
    """Get LLM provider, raising error if not configured.

    Raises:
        typer.Exit: If the provider is not configured
    """
    con = console or _console
    llm = get_llm(con)
    if not llm:
        con.print("[red]Error: LLM provider not configured[/red]")
        raise typer.Exit(code=1)
    return llm


def get_key_value_store(
    backend: str | None = None,
    path: str | Path | None = None,
) -> KeyValueStore:
    """Create the persistence backend.

    Args:
        backend: "memory" or "sqlite"; falls back to MERCANTO_MEMORY
        path: SQLite file; falls back to MERCANTO_MEMORY_PATH

    Environment variables:
        MERCANTO_MEMORY: Backend type (default: sqlite)
        MERCANTO_MEMORY_PATH: SQLite file (default: ~/.mercanto/store.db)
    """
    backend = (backend or os.getenv("MERCANTO_MEMORY", DEFAULT_MEMORY_BACKEND)).lower()
    kwargs: dict[str, Any] = {}
    if backend == "sqlite":
        db_path = Path(path or os.getenv("MERCANTO_MEMORY_PATH", DEFAULT_MEMORY_PATH)).expanduser()
        db_path.parent.mkdir(parents=True, exist_ok=True)
        kwargs["path"] = db_path
    return create_key_value_store(backend, **kwargs)


def get_chart_renderer() -> ChartRenderer:
    """Create the chart renderer.

    Environment variables:
        MERCANTO_CHART_DIR: Directory for rendered PNGs (default: temp dir)
    """
    return ChartRenderer(
        output_dir=os.getenv("MERCANTO_CHART_DIR") or None,
        width=CHART_WIDTH,
        height=CHART_HEIGHT,
        dpi=CHART_DPI,
    )


def build_controller(
    llm: LLMProvider,
    backend: KeyValueStore,
    deep_thinking: bool = False,
) -> ConversationController:
    """Wire store, gateway and controller together."""
    store = ConversationStore(backend)
    gateway = ModelGateway(llm)
    return ConversationController(store, gateway, deep_thinking=deep_thinking)
