"""Main CLI application using Typer."""
import asyncio
from typing import Any

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..chat.session import ERROR_PREFIX
from ..ui.widgets import LogLevel
from .providers import get_session_config, require_session
from .surface import ConsoleChatSurface

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="colloquy",
    help="Chat with a Gemini model from the terminal",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()

_EXIT_WORDS = ("exit", "quit", "q")


def _console_debug_callback(log_level: str) -> Any:
    """Print diagnostic messages at or above log_level, dimmed."""
    threshold = LogLevel.parse(log_level)

    def _callback(level: str, component: str, message: str) -> None:
        severity = LogLevel.parse(level)
        if severity >= threshold:
            console.print(
                f"[dim]{severity.name:<7} {escape(f'[{component}] {message}')}[/dim]",
                highlight=False,
            )

    return _callback


LOG_LEVEL_OPTION = typer.Option(
    None,
    "--log-level",
    "-l",
    help="Print diagnostics with level: debug (all), info, warning, or error"
)


@app.command()
def ask(
    text: str = typer.Argument(..., help="Message to send"),
    log_level: str | None = LOG_LEVEL_OPTION,
):
    """Send a single message and print the reply."""
    async def _ask() -> bool:
        surface = ConsoleChatSurface(console)
        session = require_session(surface, console)
        if log_level:
            session.set_debug_callback(_console_debug_callback(log_level))

        async with session:
            accepted = await session.send(text)

        if not accepted:
            console.print("[yellow]Nothing to send.[/yellow]")
            return False
        reply = surface.last_reply
        return reply is not None and not reply.text.startswith(ERROR_PREFIX)

    if not asyncio.run(_ask()):
        raise typer.Exit(code=1)


@app.command()
def chat(log_level: str | None = LOG_LEVEL_OPTION):
    """Interactive chat in the terminal."""
    async def _chat():
        surface = ConsoleChatSurface(console)
        session = require_session(surface, console)
        if log_level:
            session.set_debug_callback(_console_debug_callback(log_level))

        console.print("[bold cyan]Colloquy[/bold cyan]")
        console.print(f"[dim]Model: {session.options.model}[/dim]")
        console.print("[dim]Type 'exit', 'quit', or 'q' to leave[/dim]\n")

        async with session:
            while True:
                try:
                    user_input = await asyncio.to_thread(
                        console.input, "[bold yellow]You:[/bold yellow] "
                    )
                except (KeyboardInterrupt, EOFError):
                    console.print("\n[dim]Goodbye![/dim]")
                    break

                if user_input.strip().lower() in _EXIT_WORDS:
                    console.print("[dim]Goodbye![/dim]")
                    break

                if await session.send(user_input):
                    console.print()

    try:
        asyncio.run(_chat())
    except KeyboardInterrupt:
        pass


@app.command(name="tui")
def tui_command(log_level: str | None = LOG_LEVEL_OPTION):
    """Launch interactive TUI chat interface."""
    async def _tui():
        from ..ui import run_textual_tui

        session = require_session(console=console)
        try:
            await run_textual_tui(session, log_level=log_level)
        finally:
            await session.close()
            console.print("\n[dim]Goodbye![/dim]")

    try:
        asyncio.run(_tui())
    except KeyboardInterrupt:
        pass


@app.command()
def config():
    """Show the resolved configuration."""
    try:
        settings = get_session_config()
    except ValueError as e:
        console.print(f"[red]Error: invalid numeric setting: {e}[/red]")
        raise typer.Exit(code=1)

    api_key = settings.pop("api_key")
    table = Table(title="Colloquy configuration", show_header=True, header_style="bold cyan")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    if api_key:
        table.add_row("api_key", f"{api_key[:4]}{'*' * 8}" if len(api_key) > 4 else "*" * 8)
    else:
        table.add_row("api_key", "[red]not set[/red]")
    for key, value in settings.items():
        table.add_row(key, "[dim]default[/dim]" if value is None else str(value))

    console.print(table)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
