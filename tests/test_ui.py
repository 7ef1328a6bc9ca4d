"""Tests for the Textual TUI surface."""
import asyncio

import httpx
import pytest
from helpers import HI_RESPONSE

from colloquy.chat import THINKING_TEXT, ChatSession, ProviderOptions, Role
from colloquy.ui import ChatInputBar, ChatLogView, ChatTextualApp, DebugPanel, LogLevel, PromptHistory


class GatedReply:
    """Handler that holds each request until released."""

    def __init__(self) -> None:
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.started.set()
        await self.release.wait()
        return httpx.Response(200, text=HI_RESPONSE)


@pytest.fixture
def gated():
    return GatedReply()


@pytest.fixture
def tui_session(make_transport, gated):
    options = ProviderOptions(api_key="test-key", google_search=False)
    return ChatSession(options, transport=make_transport(gated))


def _texts(lines) -> list[str]:
    return [line.text for line in lines]


class TestChatTextualApp:
    """Tests for the TUI driving a ChatSession."""

    @pytest.mark.asyncio
    async def test_welcome_line_on_mount(self, tui_session):
        app = ChatTextualApp(tui_session)
        async with app.run_test():
            view = app.query_one(ChatLogView)

            assert [line.role for line in view.lines] == [Role.SYSTEM]
            assert tui_session.log.last.role is Role.SYSTEM
            assert not app.query_one(DebugPanel).display

    @pytest.mark.asyncio
    async def test_send_round_trip(self, tui_session, gated):
        app = ChatTextualApp(tui_session)
        async with app.run_test() as pilot:
            bar = app.query_one(ChatInputBar)
            view = app.query_one(ChatLogView)

            bar.text_area.text = "hello"
            await pilot.press("ctrl+j")
            await asyncio.wait_for(gated.started.wait(), timeout=5)

            # In flight: button disabled, input cleared, thinking line shown
            assert tui_session.busy
            assert bar.send_button.disabled
            assert bar.text_area.text == ""
            assert _texts(view.lines)[-2:] == ["hello", THINKING_TEXT]
            assert view.lines[-1].is_transient

            # Submission while busy is ignored and the text stays put
            bar.text_area.text = "second"
            await pilot.press("ctrl+j")
            await pilot.pause()
            assert bar.text_area.text == "second"
            assert _texts(tui_session.log)[-2:] == ["hello", THINKING_TEXT]

            view.focus()
            await pilot.pause()
            gated.release.set()
            await app.workers.wait_for_complete()
            await pilot.pause()

            assert not tui_session.busy
            assert _texts(view.lines)[-2:] == ["hello", "hi"]
            assert not any(line.is_transient for line in view.lines)
            assert len(view.query(".log-line")) == len(view.lines)
            assert not view.query(".transient")
            assert not bar.send_button.disabled
            assert app.focused is bar.text_area

    @pytest.mark.asyncio
    async def test_clear_view_keeps_session_log(self, tui_session):
        app = ChatTextualApp(tui_session)
        async with app.run_test() as pilot:
            app.action_clear_chat()
            await pilot.pause()

            assert app.query_one(ChatLogView).lines == ()
            assert len(tui_session.log) == 1

    @pytest.mark.asyncio
    async def test_log_level_shows_filtered_panel(self, tui_session):
        app = ChatTextualApp(tui_session, log_level="warning")
        async with app.run_test() as pilot:
            panel = app.query_one(DebugPanel)

            assert panel.display
            assert panel.threshold is LogLevel.WARNING
            assert not panel.trace(LogLevel.INFO, "Session", "quiet")
            assert panel.trace(LogLevel.ERROR, "Transport", "loud")

            app.action_toggle_debug()
            await pilot.pause()
            assert not panel.display


class TestPromptHistory:
    """Tests for prompt recall."""

    def test_recall_walks_back_then_forward(self):
        history = PromptHistory()
        for prompt in ("one", "two", "three"):
            history.record(prompt)

        assert [history.older() for _ in range(4)] == ["three", "two", "one", "one"]
        assert [history.newer() for _ in range(3)] == ["two", "three", ""]
        assert history.newer() is None

    def test_empty_history_recalls_nothing(self):
        history = PromptHistory()

        assert history.older() is None
        assert history.newer() is None

    def test_repeats_collapse_and_limit_applies(self):
        history = PromptHistory(limit=2)
        for prompt in ("a", "a", "b", "c"):
            history.record(prompt)

        assert len(history) == 2
        assert history.older() == "c"
        assert history.older() == "b"
        assert history.older() == "b"


class TestLogLevel:
    """Tests for LogLevel.parse."""

    @pytest.mark.parametrize("name,level", [
        ("debug", LogLevel.DEBUG),
        ("INFO", LogLevel.INFO),
        (" warning ", LogLevel.WARNING),
        ("error", LogLevel.ERROR),
        ("verbose", LogLevel.DEBUG),
    ])
    def test_parse(self, name: str, level: LogLevel):
        assert LogLevel.parse(name) is level
