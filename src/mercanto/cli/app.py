"""Main CLI application using Typer."""
import asyncio
import logging
import os

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..charts import extract
from ..conversation import ConversationStore, MessageRole
from ..ui.config import THEME_DARK, THEME_LIGHT
from .providers import (
    DEFAULT_MODEL,
    build_controller,
    get_api_key,
    get_chart_renderer,
    get_key_value_store,
    require_llm,
)

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="mercanto",
    help="Conversational e-commerce analytics assistant with charts",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()


def _configure_logging(level: str = "warning") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def chat(
    deep_thinking: bool = typer.Option(
        False,
        "--deep-thinking",
        "-d",
        help="Start in Deep Thinking mode (extended reasoning budget)"
    ),
    theme: str | None = typer.Option(
        None,
        "--theme",
        "-t",
        help="Colour theme: 'dark' or 'light' (default: last used)"
    ),
    memory_backend: str | None = typer.Option(
        None,
        "--memory-backend",
        "-m",
        help="Conversation storage: 'memory' (session-only) or 'sqlite' (persistent)"
    ),
    memory_path: str | None = typer.Option(
        None,
        "--memory-path",
        help="Path for SQLite database (only with --memory-backend sqlite)"
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
):
    """Launch the interactive chat TUI."""
    if theme is not None and theme not in (THEME_DARK, THEME_LIGHT):
        console.print(f"[red]Error: Unknown theme: {theme}[/red]")
        raise typer.Exit(code=1)

    async def _chat():
        from ..ui import run_textual_tui

        llm = require_llm(console)
        try:
            backend = get_key_value_store(memory_backend, memory_path)
        except ValueError as e:
            await llm.close()
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(code=1)

        controller = build_controller(llm, backend, deep_thinking=deep_thinking)
        await run_textual_tui(
            controller=controller,
            renderer=get_chart_renderer(),
            theme_name=theme,
            log_level=log_level,
        )
        console.print("\n[dim]Goodbye![/dim]")

    try:
        asyncio.run(_chat())
    except KeyboardInterrupt:
        pass


@app.command()
def clear(
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip confirmation prompt"
    ),
    memory_path: str | None = typer.Option(
        None,
        "--memory-path",
        help="Path for SQLite database"
    ),
):
    """Delete the persisted conversation."""
    _configure_logging()

    async def _clear():
        if not yes:
            console.print("[yellow]WARNING: This will delete the saved conversation![/yellow]")
            confirm = typer.confirm("Are you sure you want to continue?")
            if not confirm:
                console.print("[dim]Aborted.[/dim]")
                return

        backend = get_key_value_store("sqlite", memory_path)
        try:
            await backend.connect()
            await ConversationStore(backend).clear()
            console.print("[green]Conversation cleared.[/green]")
        except Exception as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(code=1)
        finally:
            await backend.disconnect()

    asyncio.run(_clear())


@app.command()
def history(
    memory_path: str | None = typer.Option(
        None,
        "--memory-path",
        help="Path for SQLite database"
    ),
):
    """Print the persisted conversation."""
    _configure_logging()

    async def _history():
        backend = get_key_value_store("sqlite", memory_path)
        try:
            await backend.connect()
            result = await ConversationStore(backend).load()
        finally:
            await backend.disconnect()

        if result.needs_bootstrap:
            console.print("[dim]No saved conversation.[/dim]")
            return

        for message in result.messages:
            if message.role == MessageRole.USER:
                console.print(Panel(Text(message.content), title="You", title_align="left", border_style="green"))
                continue

            extracted = extract(message.content)
            body = extracted.display_text
            if extracted.chart is not None:
                chart = extracted.chart
                body += (
                    f"\n\n[chart] {chart.title} "
                    f"({chart.chart_kind.value}, {len(chart.categories)} labels, "
                    f"{len(chart.series)} series)"
                )
            console.print(Panel(Text(body), title="Mercanto", title_align="left", border_style="magenta"))

        console.print(f"[dim]{len(result.messages)} message(s)[/dim]")

    asyncio.run(_history())


@app.command()
def health(
    memory_path: str | None = typer.Option(
        None,
        "--memory-path",
        help="Path for SQLite database"
    ),
):
    """Check API key and conversation storage."""
    _configure_logging()

    async def _health():
        all_healthy = True

        if get_api_key():
            console.print("[green]+[/green] Gemini API key: SET")
        else:
            console.print("[red]x[/red] Gemini API key: NOT SET")
            all_healthy = False

        backend = get_key_value_store("sqlite", memory_path)
        try:
            await backend.connect()
            result = await ConversationStore(backend).load()
            console.print("[green]+[/green] Conversation store: OK")
        except Exception as e:
            console.print(f"[red]x[/red] Conversation store: FAILED ({e})")
            all_healthy = False
            result = None
        finally:
            await backend.disconnect()

        table = Table(show_header=False, box=None)
        table.add_column("Setting", style="bold cyan", width=15)
        table.add_column("Value")
        table.add_row("Model", os.getenv("GEMINI_MODEL", DEFAULT_MODEL))
        table.add_row("Store", str(getattr(backend, "db_path", backend.backend_type)))
        if result is not None:
            table.add_row("Messages", str(len(result.messages)))
        console.print(table)

        if not all_healthy:
            raise typer.Exit(code=1)

    asyncio.run(_health())


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
