"""Unit tests for the scrollback log."""
import pytest
from helpers import FakeSurface

from colloquy.chat import ChatLog, LogLine, LogListener, Role


def _user(text: str = "hello") -> LogLine:
    return LogLine(role=Role.USER, text=text)


def _thinking() -> LogLine:
    return LogLine(role=Role.ASSISTANT, text="thinking…", is_transient=True)


class TestLogListenerInterface:
    """Tests for the abstract LogListener interface."""

    def test_listener_is_abstract(self):
        """Test that LogListener cannot be instantiated directly."""
        with pytest.raises(TypeError):
            LogListener()  # type: ignore


class TestChatLog:
    """Tests for ChatLog."""

    def test_append_preserves_order(self):
        log = ChatLog()
        log.append(_user("one"))
        log.append(_user("two"))

        assert [line.text for line in log] == ["one", "two"]
        assert len(log) == 2
        assert log.last.text == "two"

    def test_empty_log(self):
        log = ChatLog()
        assert len(log) == 0
        assert log.last is None
        assert log.lines == ()

    def test_retract_removes_transient_tail(self):
        log = ChatLog()
        log.append(_user())
        log.append(_thinking())

        removed = log.retract_last()

        assert removed is not None and removed.is_transient
        assert log.lines == (_user(),)

    def test_retract_twice_is_idempotent(self):
        """Second retract with no transient tail is a no-op."""
        log = ChatLog()
        log.append(_user())
        log.append(_thinking())

        assert log.retract_last() is not None
        assert log.retract_last() is None
        assert log.lines == (_user(),)

    def test_retract_keeps_non_transient_tail(self):
        log = ChatLog()
        log.append(_user())

        assert log.retract_last() is None
        assert len(log) == 1

    def test_retract_on_empty_log_is_noop(self):
        assert ChatLog().retract_last() is None

    def test_lines_snapshot_is_immutable(self):
        log = ChatLog()
        log.append(_user())
        snapshot = log.lines
        log.append(_user("later"))

        assert len(snapshot) == 1

    def test_log_line_is_frozen(self):
        line = _user()
        with pytest.raises(ValueError):
            line.text = "changed"  # type: ignore


class TestChatLogListeners:
    """Tests for change notifications."""

    def test_listener_sees_append_and_retract(self):
        log = ChatLog()
        listener = FakeSurface()
        log.subscribe(listener)

        log.append(_user())
        log.append(_thinking())
        log.retract_last()

        assert listener.events == [
            "append:user:hello",
            "append:assistant:thinking…",
            "retract:thinking…",
        ]
        assert listener.rendered == [_user()]

    def test_noop_retract_does_not_notify(self):
        log = ChatLog()
        listener = FakeSurface()
        log.subscribe(listener)
        log.append(_user())

        log.retract_last()

        assert listener.events == ["append:user:hello"]

    def test_subscribe_twice_notifies_once(self):
        log = ChatLog()
        listener = FakeSurface()
        log.subscribe(listener)
        log.subscribe(listener)

        log.append(_user())

        assert len(listener.events) == 1

    def test_unsubscribe(self):
        log = ChatLog()
        listener = FakeSurface()
        log.subscribe(listener)
        log.unsubscribe(listener)
        log.unsubscribe(listener)

        log.append(_user())

        assert listener.events == []
