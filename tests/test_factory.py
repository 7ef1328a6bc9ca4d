"""Unit tests for session and transport factories."""
import pytest
from helpers import FakeSurface
from pydantic import ValidationError

from colloquy.chat import (
    ChatSession,
    LogLine,
    ProviderOptions,
    RetryingTransport,
    Role,
    create_chat_session,
    create_transport,
)


class TestProviderOptions:
    """Tests for ProviderOptions."""

    def test_defaults(self):
        options = ProviderOptions(api_key="secret")

        assert options.model == "gemini-2.5-flash"
        assert options.google_search is True
        assert options.temperature is None
        assert options.max_output_tokens is None

    def test_endpoint_contains_model_and_key(self):
        options = ProviderOptions(api_key="secret", model="gemini-2.5-pro", base_url="https://example.test/v1/")

        assert options.endpoint == "https://example.test/v1/models/gemini-2.5-pro:generateContent?key=secret"

    def test_redacted_endpoint_hides_key(self):
        options = ProviderOptions(api_key="secret")

        assert "secret" not in options.redacted_endpoint
        assert "key=REDACTED" in options.redacted_endpoint

    def test_credential_not_in_repr(self):
        assert "secret" not in repr(ProviderOptions(api_key="secret"))

    def test_options_are_frozen(self):
        options = ProviderOptions(api_key="secret")
        with pytest.raises(ValidationError):
            options.model = "other"  # type: ignore

    @pytest.mark.parametrize("temperature", [-0.1, 2.5])
    def test_temperature_bounds(self, temperature: float):
        with pytest.raises(ValidationError):
            ProviderOptions(api_key="secret", temperature=temperature)


class TestCreateTransport:
    """Tests for create_transport."""

    def test_defaults(self):
        transport = create_transport()

        assert isinstance(transport, RetryingTransport)
        assert transport.max_attempts == 3
        assert transport.deadline == 60.0

    def test_overrides(self):
        transport = create_transport(max_attempts=5, deadline=None)

        assert transport.max_attempts == 5
        assert transport.deadline is None


class TestCreateChatSession:
    """Tests for create_chat_session."""

    def test_missing_api_key_raises(self):
        with pytest.raises(TypeError, match="api_key"):
            create_chat_session(model="gemini-2.5-flash")

    def test_empty_api_key_raises(self):
        with pytest.raises(TypeError):
            create_chat_session(api_key="")

    def test_splits_provider_and_transport_config(self):
        session = create_chat_session(
            api_key="secret",
            model="gemini-2.5-pro",
            google_search=False,
            max_attempts=2,
            deadline=5.0,
        )

        assert isinstance(session, ChatSession)
        assert session.options.model == "gemini-2.5-pro"
        assert session.options.google_search is False
        assert session.transport.max_attempts == 2
        assert session.transport.deadline == 5.0
        assert not session.busy

    def test_attaches_surface(self):
        surface = FakeSurface()
        session = create_chat_session(surface=surface, api_key="secret")

        session.log.append(LogLine(role=Role.SYSTEM, text="hi"))

        assert surface.events == ["append:system:hi"]

    def test_invalid_option_raises_validation_error(self):
        with pytest.raises(ValidationError):
            create_chat_session(api_key="secret", max_output_tokens=0)
