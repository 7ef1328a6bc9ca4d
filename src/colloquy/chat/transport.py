"""HTTP transport with bounded exponential backoff.

Hidden design decisions:
- HTTP client setup and ownership (httpx.AsyncClient)
- Outcome classification (2xx / 429 / everything else)
- Backoff schedule and the overall deadline
"""

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import httpx

from .models import RetryableFailure, Success, TerminalFailure, TransportOutcome

RATE_LIMIT_STATUS = 429

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_INITIAL_DELAY = 1.0
DEFAULT_DEADLINE = 60.0
DEFAULT_TIMEOUT = 30.0


def classify_response(response: httpx.Response) -> TransportOutcome:
    """Map an HTTP response to a transport outcome.

    Only 429 is retryable. Other 4xx/5xx are definitive and must not
    consume the retry budget.
    """
    if response.is_success:
        return Success(body=response.text, status_code=response.status_code)

    reason = f"HTTP {response.status_code} {response.reason_phrase}".strip()
    if response.status_code == RATE_LIMIT_STATUS:
        return RetryableFailure(status_code=response.status_code, reason=reason)
    return TerminalFailure(status_code=response.status_code, reason=reason)


class RetryingTransport:
    """POSTs a request body, retrying rate-limited attempts.

    Supports async context manager protocol for client cleanup:
        async with RetryingTransport() as transport:
            outcome = await transport.execute(url, body, headers)
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        initial_delay: float = DEFAULT_INITIAL_DELAY,
        deadline: float | None = DEFAULT_DEADLINE,
        timeout: float = DEFAULT_TIMEOUT,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """Initialize the transport.

        Args:
            client: Shared HTTP client (None creates and owns one)
            max_attempts: Total attempts including the first (default 3)
            initial_delay: Seconds to wait after the first 429 (doubles each time)
            deadline: Overall bound in seconds for attempts plus backoff, None disables
            timeout: Per-request timeout in seconds for an owned client
            sleep: Coroutine used for backoff waits
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if initial_delay < 0:
            raise ValueError("initial_delay must not be negative")

        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))
        self._max_attempts = max_attempts
        self._initial_delay = initial_delay
        self._deadline = deadline
        self._sleep = sleep
        self._debug_callback: Any | None = None

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    @property
    def deadline(self) -> float | None:
        return self._deadline

    def set_debug_callback(self, callback: Any) -> None:
        """Set the debug callback (level, component, message)."""
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Transport", message)

    async def execute(
        self,
        endpoint: str,
        body: bytes,
        headers: Mapping[str, str],
    ) -> TransportOutcome:
        """POST body to endpoint, retrying on 429.

        Never raises for HTTP or network failures; they are returned as
        TerminalFailure.

        Returns:
            Success, or TerminalFailure (RetryableFailure never escapes)
        """
        if self._deadline is None:
            return await self._run(endpoint, body, headers)
        try:
            return await asyncio.wait_for(
                self._run(endpoint, body, headers), timeout=self._deadline
            )
        except asyncio.TimeoutError:
            self._debug("error", f"Deadline of {self._deadline:g}s exceeded")
            return TerminalFailure(reason=f"no response within {self._deadline:g}s")

    async def _run(
        self,
        endpoint: str,
        body: bytes,
        headers: Mapping[str, str],
    ) -> TransportOutcome:
        delay = self._initial_delay
        last: RetryableFailure | None = None

        for attempt in range(1, self._max_attempts + 1):
            self._debug("debug", f"Attempt {attempt}/{self._max_attempts}")
            outcome = await self._attempt(endpoint, body, headers)

            if isinstance(outcome, Success):
                self._debug("info", f"HTTP {outcome.status_code} after {attempt} attempt(s)")
                return outcome.model_copy(update={"attempts": attempt})
            if isinstance(outcome, TerminalFailure):
                self._debug("error", f"Terminal failure: {outcome.reason}")
                return outcome.model_copy(update={"attempts": attempt})

            last = outcome
            if attempt == self._max_attempts:
                break
            self._debug("warning", f"Rate limited, retrying in {delay:g}s")
            await self._sleep(delay)
            delay *= 2

        self._debug("error", f"Rate limited on all {self._max_attempts} attempts")
        return TerminalFailure(
            status_code=last.status_code if last else RATE_LIMIT_STATUS,
            reason=f"rate limited; retries exhausted after {self._max_attempts} attempts",
            attempts=self._max_attempts,
            retries_exhausted=True,
        )

    async def _attempt(
        self,
        endpoint: str,
        body: bytes,
        headers: Mapping[str, str],
    ) -> TransportOutcome:
        try:
            response = await self._client.post(endpoint, content=body, headers=dict(headers))
        except httpx.HTTPError as e:
            # DNS, refused connections and timeouts are not rate limits
            detail = str(e) or type(e).__name__
            return TerminalFailure(reason=f"network error: {detail}")

        outcome = classify_response(response)
        if not isinstance(outcome, Success):
            self._debug("debug", f"Response body: {response.text[:500]}")
        return outcome

    async def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "RetryingTransport":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
