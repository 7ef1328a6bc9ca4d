"""Scrollback log of display lines."""

from collections.abc import Iterator

from .base import LogListener
from .models import LogLine


class ChatLog:
    """Append-only scrollback buffer.

    The only removal is retract_last(), which drops the tail line when it is
    transient. Listeners are notified after every change.
    """

    def __init__(self, lines: list[LogLine] | None = None) -> None:
        self._lines: list[LogLine] = list(lines or [])
        self._listeners: list[LogListener] = []

    def subscribe(self, listener: LogListener) -> None:
        """Register a listener for append/retract notifications."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: LogListener) -> None:
        """Stop notifying a listener. Unknown listeners are ignored."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def append(self, line: LogLine) -> None:
        """Add a line at the tail."""
        self._lines.append(line)
        for listener in list(self._listeners):
            listener.line_appended(line)

    def retract_last(self) -> LogLine | None:
        """Remove the tail line if it is transient.

        Returns:
            The removed line, or None if nothing was removed
        """
        if not self._lines or not self._lines[-1].is_transient:
            return None
        line = self._lines.pop()
        for listener in list(self._listeners):
            listener.line_retracted(line)
        return line

    @property
    def lines(self) -> tuple[LogLine, ...]:
        """Snapshot of the current lines in display order."""
        return tuple(self._lines)

    @property
    def last(self) -> LogLine | None:
        return self._lines[-1] if self._lines else None

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[LogLine]:
        return iter(tuple(self._lines))
