"""Session factory functions for CLI.

Centralizes creation of chat sessions from environment variables.
Hides configuration details from command implementations.
"""

import os
from typing import Any

from pydantic import ValidationError
from rich.console import Console

from ..chat import ChatSession, ChatSurface, create_chat_session
from ..chat.models import DEFAULT_BASE_URL, DEFAULT_MODEL

# Default console for output
_console = Console()

_TRUE_VALUES = ("1", "true", "yes", "on")


def _env_float(name: str, default: float | None) -> float | None:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    if value.strip().lower() == "none":
        return None
    return float(value)


def _env_int(name: str, default: int | None) -> int | None:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return int(value)


def get_session_config() -> dict[str, Any]:
    """Read session configuration from environment variables.

    Returns:
        Keyword arguments for create_chat_session (api_key may be None)

    Raises:
        ValueError: If a numeric variable cannot be parsed

    Environment variables:
        GEMINI_API_KEY: Gemini API key (required to send)
        GEMINI_MODEL: Model (default: gemini-2.5-flash)
        GEMINI_BASE_URL: REST base URL (default: Gemini v1beta)
        GEMINI_GOOGLE_SEARCH: Enable search grounding (default: true)
        GEMINI_TEMPERATURE: Sampling temperature (default: provider default)
        GEMINI_MAX_OUTPUT_TOKENS: Output token limit (default: provider default)
        COLLOQUY_MAX_ATTEMPTS: Total attempts on rate limits (default: 3)
        COLLOQUY_INITIAL_DELAY: First backoff wait in seconds (default: 1.0)
        COLLOQUY_DEADLINE: Overall send deadline in seconds, 'none' disables (default: 60)
        COLLOQUY_TIMEOUT: Per-request timeout in seconds (default: 30)
    """
    return {
        "api_key": os.getenv("GEMINI_API_KEY"),
        "model": os.getenv("GEMINI_MODEL", DEFAULT_MODEL),
        "base_url": os.getenv("GEMINI_BASE_URL", DEFAULT_BASE_URL),
        "google_search": os.getenv("GEMINI_GOOGLE_SEARCH", "true").strip().lower() in _TRUE_VALUES,
        "temperature": _env_float("GEMINI_TEMPERATURE", None),
        "max_output_tokens": _env_int("GEMINI_MAX_OUTPUT_TOKENS", None),
        "max_attempts": _env_int("COLLOQUY_MAX_ATTEMPTS", 3),
        "initial_delay": _env_float("COLLOQUY_INITIAL_DELAY", 1.0),
        "deadline": _env_float("COLLOQUY_DEADLINE", 60.0),
        "timeout": _env_float("COLLOQUY_TIMEOUT", 30.0),
    }


def get_session(
    surface: ChatSurface | None = None,
    console: Console | None = None
) -> ChatSession | None:
    """Create a chat session from environment variables.

    Args:
        surface: Optional UI collaborator to attach
        console: Optional Rich console for output

    Returns:
        ChatSession instance, or None if not configured
    """
    con = console or _console

    try:
        config = get_session_config()
    except ValueError as e:
        con.print(f"[red]Error: invalid numeric setting: {e}[/red]")
        return None

    if not config["api_key"]:
        con.print("[yellow]Warning: GEMINI_API_KEY not set, chat disabled[/yellow]")
        return None

    try:
        return create_chat_session(surface=surface, **config)
    except (ValidationError, ValueError) as e:
        con.print(f"[red]Error: invalid configuration: {e}[/red]")
        return None


def require_session(
    surface: ChatSurface | None = None,
    console: Console | None = None
) -> ChatSession:
    """Get a chat session, raising error if not configured.

    Raises:
        SystemExit: If the session cannot be configured
    """
    import typer

    con = console or _console
    session = get_session(surface, con)
    if not session:
        con.print("[red]Error: chat session not configured[/red]")
        raise typer.Exit(code=1)
    return session
