"""Console surface for line-based chat in a terminal.

Prints log lines with Rich markup and shows a spinner while the
transient status line is the tail of the log.
"""

from rich.console import Console
from rich.markup import escape
from rich.status import Status

from ..chat import ChatSurface, LogLine, Role

_ROLE_LABELS = {
    Role.USER: "[bold yellow]You:[/bold yellow]",
    Role.ASSISTANT: "[bold green]Assistant:[/bold green]",
    Role.SYSTEM: "[bold cyan]System:[/bold cyan]",
}


class ConsoleChatSurface(ChatSurface):
    """Renders a chat log to a Rich console."""

    def __init__(self, console: Console, echo_user: bool = False) -> None:
        """Initialize the surface.

        Args:
            console: Rich console to print to
            echo_user: Print user lines (off when the user just typed them)
        """
        self._console = console
        self._echo_user = echo_user
        self._status: Status | None = None
        self.focus_requests = 0
        self.last_reply: LogLine | None = None

    def line_appended(self, line: LogLine) -> None:
        if line.is_transient:
            self._stop_status()
            self._status = self._console.status(f"[dim]{escape(line.text)}[/dim]")
            self._status.start()
            return
        if line.role is Role.USER and not self._echo_user:
            return
        if line.role is Role.ASSISTANT:
            self.last_reply = line
        self._console.print(f"{_ROLE_LABELS[line.role]} {escape(line.text)}")

    def line_retracted(self, line: LogLine) -> None:
        self._stop_status()

    def clear_input(self) -> None:
        """Nothing to clear: the prompt already consumed the line."""

    def focus_input(self) -> None:
        self.focus_requests += 1

    def _stop_status(self) -> None:
        if self._status is not None:
            self._status.stop()
            self._status = None
