"""Test doubles shared across the test modules."""
from colloquy.chat import ChatSurface, LogLine

HI_RESPONSE = '{"candidates":[{"content":{"parts":[{"text":"hi"}]}}]}'


class FakeSurface(ChatSurface):
    """Records every call the session makes on its UI collaborator."""

    def __init__(self) -> None:
        self.rendered: list[LogLine] = []
        self.events: list[str] = []
        self.focus_requests = 0
        self.clear_requests = 0
        self.busy_history: list[bool] = []

    def line_appended(self, line: LogLine) -> None:
        self.rendered.append(line)
        self.events.append(f"append:{line.role.value}:{line.text}")

    def line_retracted(self, line: LogLine) -> None:
        self.rendered.pop()
        self.events.append(f"retract:{line.text}")

    def clear_input(self) -> None:
        self.clear_requests += 1
        self.events.append("clear")

    def focus_input(self) -> None:
        self.focus_requests += 1
        self.events.append("focus")

    def busy_changed(self, busy: bool) -> None:
        self.busy_history.append(busy)


class RecordingSleep:
    """Stand-in for asyncio.sleep that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
