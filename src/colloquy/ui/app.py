"""Main Textual TUI application.

Orchestrates the UI components and routes user input to a ChatSession.
"""

import asyncio

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header

from ..chat import ChatSession, ChatSurface, LogLine, Role
from .styles import APP_CSS
from .themes import THEMES
from .widgets import ChatInputBar, ChatLogView, DebugPanel, LogLevel

WELCOME_TEXT = "I am your assistant! Type a message and press Ctrl+J or Send."


class TextualChatSurface(ChatSurface):
    """Adapts the TUI widgets to the ChatSurface contract.

    All calls arrive on the app's event loop (sends run as async workers),
    so widgets are updated directly.
    """

    def __init__(self, log_view: ChatLogView, input_bar: ChatInputBar) -> None:
        self._log_view = log_view
        self._input_bar = input_bar

    def line_appended(self, line: LogLine) -> None:
        self._log_view.add_line(line)

    def line_retracted(self, line: LogLine) -> None:
        self._log_view.remove_last()

    def clear_input(self) -> None:
        self._input_bar.clear_input()

    def focus_input(self) -> None:
        self._input_bar.focus_input()

    def busy_changed(self, busy: bool) -> None:
        self._input_bar.set_busy(busy)


class ChatTextualApp(App):
    """Textual TUI for a single chat session."""

    CSS = APP_CSS
    TITLE = "Colloquy"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+k", "clear_chat", "Clear View"),
        Binding("ctrl+r", "copy_last_response", "Copy Reply"),
        Binding("ctrl+d", "toggle_debug", "Debug"),
        Binding("ctrl+t", "toggle_theme", "Theme"),
    ]

    def __init__(self, session: ChatSession, log_level: str | None = None) -> None:
        super().__init__()
        self._session = session
        self._log_level = log_level
        self._surface: TextualChatSurface | None = None

    @property
    def session(self) -> ChatSession:
        return self._session

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield ChatLogView(id="chat-log")
        yield DebugPanel(id="debug-panel")
        yield ChatInputBar(id="chat-input-bar")
        yield Footer()

    def on_mount(self) -> None:
        """Called when app is mounted."""
        for theme in THEMES.values():
            self.register_theme(theme)
        self.theme = "catppuccin-mocha"

        log_view = self.query_one("#chat-log", ChatLogView)
        input_bar = self.query_one("#chat-input-bar", ChatInputBar)
        log_panel = self.query_one("#debug-panel", DebugPanel)

        if self._log_level is not None:
            log_panel.threshold = LogLevel.parse(self._log_level)
            log_panel.set_visible(True)
            log_panel.trace(LogLevel.INFO, "TUI", f"Log panel enabled with level: {log_panel.threshold.name}")

        def debug_callback(level: str, component: str, message: str) -> None:
            """Route diagnostic messages to the log panel."""
            log_panel.trace(LogLevel.parse(level), component, message)

        self._session.set_debug_callback(debug_callback)

        # Render anything already in the log before subscribing
        for line in self._session.log:
            log_view.add_line(line)

        self._surface = TextualChatSurface(log_view, input_bar)
        self._session.attach(self._surface)

        self.sub_title = self._session.options.model
        self._session.log.append(LogLine(role=Role.SYSTEM, text=WELCOME_TEXT))
        input_bar.focus_input()

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        """Handle user input submission."""
        if self._session.busy:
            # Keep the text in the input; the session would drop it anyway
            self.notify("Still waiting for the previous reply", severity="warning", timeout=2)
            return
        self._send(event.value)

    @work(group="chat")
    async def _send(self, text: str) -> None:
        """Run one send as an async worker on the app's event loop."""
        await self._session.send(text)

    def action_clear_chat(self) -> None:
        """Clear the rendered chat view."""
        self.query_one("#chat-log", ChatLogView).clear_view()
        self.notify("Chat view cleared", timeout=2)

    def action_toggle_debug(self) -> None:
        """Toggle the log panel visibility."""
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)

    def action_toggle_theme(self) -> None:
        """Switch between the dark and light palette."""
        self.theme = "catppuccin-latte" if self.theme == "catppuccin-mocha" else "catppuccin-mocha"

    def action_copy_last_response(self) -> None:
        """Copy last assistant reply to clipboard."""
        response = self.query_one("#chat-log", ChatLogView).get_last_reply()
        if response:
            self.copy_to_clipboard(response)
            self.notify("Reply copied")
        else:
            self.notify("No reply to copy", severity="warning")


async def run_textual_tui(session: ChatSession, log_level: str | None = None) -> None:
    """Run the Textual TUI.

    Args:
        session: Chat session to drive (closed by the caller)
        log_level: Log level for panel (debug/info/warning/error), None to hide
    """
    app = ChatTextualApp(session=session, log_level=log_level)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
