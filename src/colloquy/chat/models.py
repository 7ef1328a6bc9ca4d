"""Data models for the chat pipeline.

Hides the representation of log lines, provider options and the
per-send results (transport outcomes and parsed replies).
"""

from enum import Enum
from typing import Annotated, Literal

import httpx
from pydantic import BaseModel, ConfigDict, Field, SecretStr

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class Role(str, Enum):
    """Author of a log line."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class SessionState(str, Enum):
    """Lifecycle state of a chat session."""

    IDLE = "idle"
    SENDING = "sending"


class FailureKind(str, Enum):
    """How a failed or skipped send is presented to the user."""

    VALIDATION_SKIP = "validation_skip"  # silent
    RATE_LIMITED = "rate_limited"  # invisible unless retries run out
    TRANSPORT_ERROR = "transport_error"
    PROVIDER_EMPTY_ANSWER = "provider_empty_answer"
    RESPONSE_MALFORMED = "response_malformed"


class LogLine(BaseModel):
    """A single display line in the scrollback log."""

    model_config = ConfigDict(frozen=True)

    role: Role = Field(description="Who the line is attributed to")
    text: str = Field(description="Plain display text")
    is_transient: bool = Field(
        default=False,
        description="Placeholder line (e.g. 'thinking…') that may be retracted"
    )


class ProviderOptions(BaseModel):
    """Provider settings fixed for the lifetime of a session."""

    model_config = ConfigDict(frozen=True)

    api_key: SecretStr = Field(description="Opaque provider credential")
    model: str = Field(default=DEFAULT_MODEL, min_length=1)
    base_url: str = Field(default=DEFAULT_BASE_URL, min_length=1)
    google_search: bool = Field(
        default=True,
        description="Enable the Google Search grounding tool"
    )
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    max_output_tokens: int | None = Field(default=None, ge=1)

    def _url(self, key: str) -> str:
        path = f"{self.base_url.rstrip('/')}/models/{self.model}:generateContent"
        return str(httpx.URL(path, params={"key": key}))

    @property
    def endpoint(self) -> str:
        """Full request URL including the credential query parameter."""
        return self._url(self.api_key.get_secret_value())

    @property
    def redacted_endpoint(self) -> str:
        """Request URL safe to show in diagnostics."""
        return self._url("REDACTED")


class ChatRequest(BaseModel):
    """One serialized request; retries reuse the same body."""

    model_config = ConfigDict(frozen=True)

    prompt: str
    options: ProviderOptions
    body: bytes
    headers: dict[str, str] = Field(
        default_factory=lambda: {"Content-Type": "application/json"}
    )


class Success(BaseModel):
    """2xx response."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["success"] = "success"
    body: str
    status_code: int = 200
    attempts: int = 1


class RetryableFailure(BaseModel):
    """Rate-limited response that may be retried after a backoff."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["retryable"] = "retryable"
    status_code: int
    reason: str


class TerminalFailure(BaseModel):
    """Failure that ends the send."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["terminal"] = "terminal"
    status_code: int | None = None  # None for network-level errors
    reason: str
    attempts: int = 1
    retries_exhausted: bool = False


TransportOutcome = Annotated[
    Success | RetryableFailure | TerminalFailure,
    Field(discriminator="kind"),
]


class TextReply(BaseModel):
    """Reply text extracted from the provider response."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    text: str


class EmptyReply(BaseModel):
    """The provider answered but supplied no text (e.g. content filtering)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["empty"] = "empty"
    explanation: str
    finish_reason: str | None = None


class ParseError(BaseModel):
    """The response body could not be interpreted."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["parse_error"] = "parse_error"
    message: str
    raw_body: str


ParsedReply = Annotated[
    TextReply | EmptyReply | ParseError,
    Field(discriminator="kind"),
]
