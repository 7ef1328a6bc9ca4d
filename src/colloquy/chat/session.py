"""Chat session orchestrating one request at a time.

Hidden design decisions:
- Busy-flag guard (at most one send in flight, extra sends dropped)
- Ordering of log updates around the network call
- Mapping of every outcome to exactly one assistant line
"""

import asyncio
from typing import Any

from .base import ChatSurface
from .codec import RequestCodec
from .log import ChatLog
from .models import (
    EmptyReply,
    FailureKind,
    LogLine,
    ProviderOptions,
    Role,
    SessionState,
    Success,
    TerminalFailure,
    TextReply,
)
from .parser import ResponseParser
from .transport import RetryingTransport

THINKING_TEXT = "thinking…"
ERROR_PREFIX = "[Error]"
NOTICE_PREFIX = "[Notice]"


def _truncate(text: str, max_len: int = 200) -> str:
    return text if len(text) <= max_len else text[:max_len] + "..."


class ChatSession:
    """Sends user prompts to the provider and keeps the log consistent.

    Usage:
        session = ChatSession(options, surface=my_surface)
        await session.send("hello")
    """

    def __init__(
        self,
        options: ProviderOptions,
        transport: RetryingTransport | None = None,
        surface: ChatSurface | None = None,
        log: ChatLog | None = None,
        codec: RequestCodec | None = None,
        parser: ResponseParser | None = None,
        thinking_text: str = THINKING_TEXT,
    ):
        """Initialize the session.

        Args:
            options: Provider settings, fixed for the session lifetime
            transport: HTTP transport (None creates a default RetryingTransport)
            surface: UI collaborator to notify, can also be attached later
            log: Scrollback log (None starts an empty one)
            codec: Request encoder
            parser: Response decoder
            thinking_text: Text of the transient status line
        """
        self._options = options
        self._transport = transport or RetryingTransport()
        self._log = log if log is not None else ChatLog()
        self._codec = codec or RequestCodec()
        self._parser = parser or ResponseParser()
        self._thinking_text = thinking_text
        self._state = SessionState.IDLE
        self._surface: ChatSurface | None = None
        self._debug_callback: Any | None = None
        self._last_failure: FailureKind | None = None

        if surface is not None:
            self.attach(surface)

    @property
    def options(self) -> ProviderOptions:
        return self._options

    @property
    def log(self) -> ChatLog:
        return self._log

    @property
    def transport(self) -> RetryingTransport:
        return self._transport

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def busy(self) -> bool:
        """True while a send is in flight."""
        return self._state is SessionState.SENDING

    @property
    def last_failure(self) -> FailureKind | None:
        """Failure category of the most recent send, None if it succeeded."""
        return self._last_failure

    def attach(self, surface: ChatSurface) -> None:
        """Connect a UI surface to the log and session signals."""
        if self._surface is not None:
            self._log.unsubscribe(self._surface)
        self._surface = surface
        self._log.subscribe(surface)

    def set_debug_callback(self, callback: Any) -> None:
        """Set the debug callback for diagnostic logging.

        Args:
            callback: Callable(level, component, message) where
                      level: 'debug', 'info', 'warning', 'error'
        """
        self._debug_callback = callback
        self._transport.set_debug_callback(callback)

    def _debug(self, level: str, message: str, component: str = "Session") -> None:
        if self._debug_callback:
            self._debug_callback(level, component, message)

    def _set_busy(self, busy: bool) -> None:
        self._state = SessionState.SENDING if busy else SessionState.IDLE
        if self._surface is not None:
            self._surface.busy_changed(busy)

    async def send(self, text: str) -> bool:
        """Send a prompt.

        Args:
            text: Raw input text, trimmed before use

        Returns:
            True if the send was accepted, False if it was dropped because
            the text is blank or another send is in flight
        """
        prompt = text.strip()
        if not prompt:
            self._debug("debug", "Ignoring blank input")
            return False
        if self.busy:
            self._debug("warning", "Send dropped: a request is already in flight")
            return False

        # No await before this point, so concurrent sends cannot both get here
        self._set_busy(True)
        self._debug("info", f"Sending: '{_truncate(prompt, 50)}'")
        try:
            self._log.append(LogLine(role=Role.USER, text=prompt))
            self._log.append(
                LogLine(role=Role.ASSISTANT, text=self._thinking_text, is_transient=True)
            )
            if self._surface is not None:
                self._surface.clear_input()

            final_text = await self._exchange(prompt)
            self._finish(final_text)
        except asyncio.CancelledError:
            self._debug("warning", "Send cancelled before a reply arrived")
            self._last_failure = FailureKind.TRANSPORT_ERROR
            self._finish(f"{ERROR_PREFIX} Request cancelled")
            raise
        except Exception as e:
            self._debug("error", f"Unexpected failure: {e}")
            self._last_failure = FailureKind.TRANSPORT_ERROR
            self._finish(f"{ERROR_PREFIX} Request failed: {e}")
        finally:
            self._set_busy(False)
            if self._surface is not None:
                self._surface.focus_input()
        return True

    async def _exchange(self, prompt: str) -> str:
        """Run codec, transport and parser. Returns the final display text."""
        request = self._codec.build_request(prompt, self._options)
        self._debug("debug", f"POST {self._options.redacted_endpoint} ({len(request.body)} bytes)")

        outcome = await self._transport.execute(
            self._options.endpoint, request.body, request.headers
        )

        if isinstance(outcome, TerminalFailure):
            self._last_failure = (
                FailureKind.RATE_LIMITED if outcome.retries_exhausted
                else FailureKind.TRANSPORT_ERROR
            )
            return f"{ERROR_PREFIX} Request failed: {outcome.reason}"

        if not isinstance(outcome, Success):
            # RetryingTransport resolves retryable outcomes itself
            self._last_failure = FailureKind.TRANSPORT_ERROR
            return f"{ERROR_PREFIX} Request failed: {outcome.reason}"

        reply = self._parser.decode(outcome.body)
        if isinstance(reply, TextReply):
            self._last_failure = None
            self._debug("info", f"Reply received ({len(reply.text)} chars)")
            return reply.text
        if isinstance(reply, EmptyReply):
            self._last_failure = FailureKind.PROVIDER_EMPTY_ANSWER
            self._debug("warning", f"No text in response: {_truncate(outcome.body)}", "Parser")
            return f"{NOTICE_PREFIX} {reply.explanation}"

        self._last_failure = FailureKind.RESPONSE_MALFORMED
        self._debug("error", f"{reply.message}; body: {_truncate(reply.raw_body)}", "Parser")
        return f"{ERROR_PREFIX} Could not read the assistant response: {reply.message}"

    def _finish(self, text: str) -> None:
        """Replace the transient status line with the final assistant line."""
        self._log.retract_last()
        self._log.append(LogLine(role=Role.ASSISTANT, text=text))

    async def close(self) -> None:
        """Release the transport."""
        await self._transport.close()

    async def __aenter__(self) -> "ChatSession":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
