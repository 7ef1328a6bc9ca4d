import asyncio
from typing import Any

from .base import ChatSurface
from .models import ProviderOptions
from .session import ChatSession
from .transport import (
    DEFAULT_DEADLINE,
    DEFAULT_INITIAL_DELAY,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_TIMEOUT,
    RetryingTransport,
)

_TRANSPORT_KEYS = ("max_attempts", "initial_delay", "deadline", "timeout", "client", "sleep")


def create_transport(**config: Any) -> RetryingTransport:
    """Create a retrying transport.

    Args:
        **config: Transport configuration
            - max_attempts: int (default: 3)
            - initial_delay: float seconds (default: 1.0)
            - deadline: float seconds or None (default: 60.0)
            - timeout: float seconds per request (default: 30.0)
            - client: httpx.AsyncClient (default: owned client)
            - sleep: backoff coroutine (default: asyncio.sleep)

    Returns:
        Initialized RetryingTransport
    """
    return RetryingTransport(
        client=config.get("client"),
        max_attempts=config.get("max_attempts", DEFAULT_MAX_ATTEMPTS),
        initial_delay=config.get("initial_delay", DEFAULT_INITIAL_DELAY),
        deadline=config.get("deadline", DEFAULT_DEADLINE),
        timeout=config.get("timeout", DEFAULT_TIMEOUT),
        sleep=config.get("sleep", asyncio.sleep),
    )


def create_chat_session(surface: ChatSurface | None = None, **config: Any) -> ChatSession:
    """Create a chat session.

    This factory function hides how options and transport are assembled.

    Args:
        surface: Optional UI collaborator to attach
        **config: Provider and transport configuration
            Provider:
                - api_key: str (required)
                - model: str (default: 'gemini-2.5-flash')
                - base_url: str (default: Gemini v1beta REST base)
                - google_search: bool (default: True)
                - temperature: float | None
                - max_output_tokens: int | None
            Transport: see create_transport()

    Returns:
        ChatSession ready to send

    Raises:
        TypeError: If api_key is missing
        pydantic.ValidationError: If an option value is invalid

    Examples:
        >>> session = create_chat_session(
        ...     api_key="...",
        ...     model="gemini-2.5-flash",
        ...     google_search=False,
        ... )
    """
    if not config.get("api_key"):
        raise TypeError("Chat session requires 'api_key' in config")

    transport_config = {k: config.pop(k) for k in _TRANSPORT_KEYS if k in config}
    options = ProviderOptions(**config)
    transport = create_transport(**transport_config)
    return ChatSession(options, transport=transport, surface=surface)
