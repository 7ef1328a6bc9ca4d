"""Abstract collaborator interfaces for the chat pipeline.

This module hides how a concrete UI renders the conversation.
A surface (TUI overlay, console terminal, ...) implements the small
capability set the session needs:
- render appended lines and drop retracted ones
- clear and refocus its input widget
- optionally reflect the busy flag (e.g. disable a Send button)
"""

from abc import ABC, abstractmethod

from .models import LogLine


class LogListener(ABC):
    """Receives change notifications from a ChatLog."""

    @abstractmethod
    def line_appended(self, line: LogLine) -> None:
        """Render a new tail line and scroll to it."""

    @abstractmethod
    def line_retracted(self, line: LogLine) -> None:
        """Remove the previously rendered tail line."""


class ChatSurface(LogListener):
    """UI collaborator driven by a ChatSession."""

    @abstractmethod
    def clear_input(self) -> None:
        """Empty the input buffer after a send was accepted."""

    @abstractmethod
    def focus_input(self) -> None:
        """Return keyboard focus to the input widget."""

    def busy_changed(self, busy: bool) -> None:
        """Reflect the session busy flag. Optional."""
