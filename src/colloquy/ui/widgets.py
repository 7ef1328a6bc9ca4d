"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Scrollback rendering of log lines
- Recall of previously submitted prompts
- Diagnostic log rendering and level filtering
"""

from datetime import datetime
from enum import IntEnum

from rich.markup import escape
from rich.text import Text
from textual.containers import Horizontal, VerticalScroll
from textual.message import Message
from textual.widgets import Button, RichLog, Static, TextArea

from ..chat import LogLine, Role
from ..chat.session import ERROR_PREFIX, NOTICE_PREFIX

HISTORY_LIMIT = 100
TRACE_TIMESTAMP_FORMAT = "%H:%M:%S"
TRACE_MAX_LENGTH = 500

_ROLE_LABELS = {
    Role.USER: "You",
    Role.ASSISTANT: "AI",
    Role.SYSTEM: "System",
}


class LogLevel(IntEnum):
    """Severity of a diagnostic message; higher is more severe."""

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    @classmethod
    def parse(cls, value: str) -> "LogLevel":
        """Level for a name such as 'warning'. Unknown names mean DEBUG."""
        return cls.__members__.get(value.strip().upper(), cls.DEBUG)


class PromptHistory:
    """Submitted prompts, recalled newest first.

    Recall walks back from the newest entry; walking forward past the
    newest returns an empty draft.
    """

    def __init__(self, limit: int = HISTORY_LIMIT) -> None:
        self._entries: list[str] = []
        self._limit = limit
        self._cursor: int | None = None

    def __len__(self) -> int:
        return len(self._entries)

    def record(self, prompt: str) -> None:
        """Remember a prompt and reset recall to the newest end."""
        self._cursor = None
        if self._entries and self._entries[-1] == prompt:
            return
        self._entries.append(prompt)
        if len(self._entries) > self._limit:
            self._entries.pop(0)

    def older(self) -> str | None:
        """Step back one entry. None when there is nothing to recall."""
        if not self._entries:
            return None
        if self._cursor is None:
            self._cursor = len(self._entries) - 1
        else:
            self._cursor = max(self._cursor - 1, 0)
        return self._entries[self._cursor]

    def newer(self) -> str | None:
        """Step forward one entry. Empty string past the newest, None if not recalling."""
        if self._cursor is None:
            return None
        if self._cursor >= len(self._entries) - 1:
            self._cursor = None
            return ""
        self._cursor += 1
        return self._entries[self._cursor]


class ChatLogView(VerticalScroll):
    """Scrollback view mirroring a ChatLog, one Static per line."""

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "Conversation"
    ALLOW_MAXIMIZE = True

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._lines: list[LogLine] = []
        self._widgets: list[Static] = []

    @property
    def lines(self) -> tuple[LogLine, ...]:
        """Lines currently rendered, oldest first."""
        return tuple(self._lines)

    def add_line(self, line: LogLine) -> None:
        """Render a line at the bottom and scroll to it."""
        classes = ["log-line", line.role.value]
        if line.is_transient:
            classes.append("transient")
        elif line.text.startswith(ERROR_PREFIX):
            classes.append("error")
        elif line.text.startswith(NOTICE_PREFIX):
            classes.append("notice")

        label = Text(f"{_ROLE_LABELS[line.role]}: ", style="bold")
        widget = Static(label + Text(line.text), classes=" ".join(classes))
        self._lines.append(line)
        self._widgets.append(widget)
        self.mount(widget)
        self._update_subtitle()
        self.scroll_end(animate=False)

    def remove_last(self) -> None:
        """Drop the bottom line (used for retracted transient lines)."""
        if not self._widgets:
            return
        self._lines.pop()
        self._widgets.pop().remove()
        self._update_subtitle()

    def get_last_reply(self) -> str | None:
        """Get the last non-transient assistant line."""
        for line in reversed(self._lines):
            if line.role is Role.ASSISTANT and not line.is_transient:
                return line.text
        return None

    def clear_view(self) -> None:
        """Clear the rendered lines. The session log itself is untouched."""
        self._lines.clear()
        self._widgets.clear()
        self.remove_children()
        self.border_subtitle = "Conversation"

    def _update_subtitle(self) -> None:
        self.border_subtitle = f"{len(self._lines)} lines"


class ChatInputBar(Horizontal):
    """Chat input bar with TextArea and Send button.

    The bar does not clear itself on submit; the chat session asks for
    that once it has accepted the message. Up on the first row and Down
    on the last row recall earlier prompts.
    """

    class Submitted(Message):
        """Message sent when user submits input."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.history = PromptHistory()

    def compose(self):
        text_area = TextArea(id="chat-input", show_line_numbers=False)
        text_area.cursor_blink = False
        yield text_area
        yield Button("Send", id="send-btn", variant="success").with_tooltip(
            "Submit message (Ctrl+J)"
        )

    @property
    def text_area(self) -> TextArea:
        return self.query_one("#chat-input", TextArea)

    @property
    def send_button(self) -> Button:
        return self.query_one("#send-btn", Button)

    def on_mount(self) -> None:
        self.text_area.highlight_cursor_line = False

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            self._submit()

    def on_key(self, event) -> None:
        # Terminals do not report ctrl+enter, so ctrl+j submits
        if event.key == "ctrl+j":
            self._submit()
        elif event.key in ("up", "down"):
            row = self.text_area.cursor_location[0]
            if event.key == "up" and row == 0:
                recalled = self.history.older()
            elif event.key == "down" and row == self.text_area.document.line_count - 1:
                recalled = self.history.newer()
            else:
                return
            if recalled is None:
                return
            self.text_area.text = recalled
            self.text_area.move_cursor(self.text_area.document.end)
        else:
            return
        event.prevent_default()
        event.stop()

    def _submit(self) -> None:
        value = self.text_area.text.strip()
        if value:
            self.history.record(value)
            self.post_message(self.Submitted(value))

    def clear_input(self) -> None:
        """Empty the text input."""
        self.text_area.text = ""

    def focus_input(self) -> None:
        """Focus the text input."""
        self.text_area.focus()

    def set_busy(self, busy: bool) -> None:
        """Disable the Send button while a request is in flight."""
        self.send_button.disabled = busy
        self.send_button.label = "..." if busy else "Send"


class DebugPanel(RichLog):
    """Level-filtered diagnostic log, hidden until shown or toggled."""

    BORDER_TITLE = "Log"

    _LEVEL_COLORS = {
        LogLevel.DEBUG: "dim white",
        LogLevel.INFO: "cyan",
        LogLevel.WARNING: "yellow",
        LogLevel.ERROR: "red",
    }

    _COMPONENT_COLORS = {
        "TUI": "cyan",
        "Session": "green",
        "Transport": "magenta",
        "Parser": "bright_blue",
    }

    def __init__(self, *args, threshold: LogLevel = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(*args, markup=True, highlight=False, wrap=False, **kwargs)
        self.threshold = threshold
        self.border_subtitle = "Hidden"

    def trace(self, level: LogLevel, component: str, message: str) -> bool:
        """Write an entry if level meets the threshold. Returns True if written."""
        if level < self.threshold:
            return False
        if len(message) > TRACE_MAX_LENGTH:
            message = message[:TRACE_MAX_LENGTH] + "..."

        timestamp = datetime.now().strftime(TRACE_TIMESTAMP_FORMAT)
        level_color = self._LEVEL_COLORS[level]
        comp_color = self._COMPONENT_COLORS.get(component, "white")
        self.write(
            f"[dim]{timestamp}[/] "
            f"[{level_color}]{level.name:<7}[/] "
            f"[{comp_color}]{escape(f'[{component}]')}[/] {escape(message)}"
        )
        return True

    def set_visible(self, visible: bool) -> None:
        self.display = visible
        self.border_subtitle = f"Level: {self.threshold.name}" if visible else "Hidden"

    def toggle(self) -> bool:
        """Flip visibility. Returns True if now visible."""
        self.set_visible(not self.display)
        return bool(self.display)
