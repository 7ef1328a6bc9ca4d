"""
Colloquy: an async chat front-end for the Gemini generateContent API.

This package follows Parnas's information hiding principles,
where each module hides a specific design decision.
"""

__version__ = "0.1.0"

from .chat import (
    ChatLog,
    ChatSession,
    ChatSurface,
    LogLine,
    ProviderOptions,
    Role,
    create_chat_session,
)

__all__ = [
    "ChatLog",
    "ChatSession",
    "ChatSurface",
    "LogLine",
    "ProviderOptions",
    "Role",
    "create_chat_session",
]
