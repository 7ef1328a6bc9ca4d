"""Terminal UI module for colloquy.

Provides a Textual-based TUI surface for a ChatSession.

Module structure (Parnas principle - each module hides a design decision):
- widgets.py: Custom widgets (scrollback view, input bar, debug panel) and log levels
- styles.py: CSS styling (layout decisions)
- themes.py: Color palettes and theme configuration
- app.py: Application orchestration and the ChatSurface adapter
"""

from .app import ChatTextualApp, TextualChatSurface, run_textual_tui
from .widgets import ChatInputBar, ChatLogView, DebugPanel, LogLevel, PromptHistory

__all__ = [
    "ChatInputBar",
    "ChatLogView",
    "ChatTextualApp",
    "DebugPanel",
    "LogLevel",
    "PromptHistory",
    "TextualChatSurface",
    "run_textual_tui",
]
