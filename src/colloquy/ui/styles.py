"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Layout: scrollback on top, optional debug panel below it, input bar at
the bottom.
"""

APP_CSS = """
Screen {
    layout: vertical;
    background: $background;
}

#chat-log {
    height: 1fr;
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;

    &:focus-within {
        border: round $primary;
    }
}

.log-line {
    width: 100%;
    height: auto;
    margin: 0 0 1 0;
}

.log-line.user {
    color: $accent;
}

.log-line.assistant {
    color: $foreground;
}

.log-line.system {
    color: $secondary;
    text-style: italic;
}

.log-line.transient {
    color: $text-muted;
    text-style: italic;
}

.log-line.error {
    color: $error;
}

.log-line.notice {
    color: $warning;
}

#debug-panel {
    height: 12;
    display: none;
    background: $surface;
    border: round $warning 50%;
    border-title-color: $warning;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
}

ChatInputBar {
    height: 5;
    dock: bottom;
    padding: 0 1;
}

#chat-input {
    width: 1fr;
    height: 100%;
    border: round $border;

    &:focus {
        border: round $primary;
    }
}

#send-btn {
    width: 10;
    height: 3;
    margin: 1 0 0 1;
}
"""
