from .base import ChatSurface, LogListener
from .codec import RequestCodec
from .factory import create_chat_session, create_transport
from .log import ChatLog
from .models import (
    ChatRequest,
    EmptyReply,
    FailureKind,
    LogLine,
    ParseError,
    ProviderOptions,
    RetryableFailure,
    Role,
    SessionState,
    Success,
    TerminalFailure,
    TextReply,
)
from .parser import ResponseParser
from .session import THINKING_TEXT, ChatSession
from .transport import RetryingTransport, classify_response

__all__ = [
    "THINKING_TEXT",
    "ChatLog",
    "ChatRequest",
    "ChatSession",
    "ChatSurface",
    "EmptyReply",
    "FailureKind",
    "LogLine",
    "LogListener",
    "ParseError",
    "ProviderOptions",
    "RequestCodec",
    "ResponseParser",
    "RetryableFailure",
    "RetryingTransport",
    "Role",
    "SessionState",
    "Success",
    "TerminalFailure",
    "TextReply",
    "classify_response",
    "create_chat_session",
    "create_transport",
]
