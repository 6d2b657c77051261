"""Unit tests for duologue.core.logging module.

Tests structured logging configuration and logger creation.
"""

from unittest.mock import MagicMock, patch

import structlog

from duologue.core.config import Settings
from duologue.core.logging import (
    add_service_context,
    configure_logging,
    conversation_context,
    get_logger,
)


def _settings(environment: str, log_level: str = "INFO") -> Settings:
    return Settings(environment=environment, log_level=log_level, _env_file=None)


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_logging_development(self) -> None:
        """Test development logs render to the console."""
        with patch("duologue.core.logging.structlog.configure") as mock_configure:
            configure_logging(_settings("development", "DEBUG"), force=True)

            mock_configure.assert_called_once()
            processors = mock_configure.call_args.kwargs["processors"]
            assert add_service_context in processors
            assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_configure_logging_production(self) -> None:
        """Test that production logs render as JSON."""
        with patch("duologue.core.logging.structlog.configure") as mock_configure:
            configure_logging(_settings("production"), force=True)

            processors = mock_configure.call_args.kwargs["processors"]
            assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_configure_logging_idempotent(self) -> None:
        """Test that repeated calls configure only once."""
        with patch("duologue.core.logging.structlog.configure") as mock_configure:
            configure_logging(_settings("development"), force=True)
            configure_logging(_settings("production"))

            mock_configure.assert_called_once()

    def test_configure_logging_uses_cached_settings(self) -> None:
        """Test that settings default to get_settings()."""
        with patch("duologue.core.logging.get_settings") as mock_settings:
            mock_settings.return_value = _settings("staging")

            with patch("duologue.core.logging.structlog.configure") as mock_configure:
                configure_logging(force=True)

            processors = mock_configure.call_args.kwargs["processors"]
            assert isinstance(processors[-1], structlog.processors.JSONRenderer)


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger_with_name(self) -> None:
        """Test getting a named logger."""
        with patch("duologue.core.logging.structlog.get_logger") as mock_get:
            mock_get.return_value = MagicMock()

            get_logger("test_module")

            mock_get.assert_called_once_with("test_module")

    def test_get_logger_without_name(self) -> None:
        """Test getting logger without explicit name."""
        with patch("duologue.core.logging.structlog.get_logger") as mock_get:
            mock_get.return_value = MagicMock()

            get_logger()

            mock_get.assert_called_once_with(None)


class TestAddServiceContext:
    """Tests for add_service_context processor."""

    def test_adds_service_context(self) -> None:
        """Test that service context is added to log events."""
        with patch("duologue.core.logging.get_settings") as mock_settings:
            mock_settings.return_value.service_name = "duologue"
            mock_settings.return_value.environment = "test"

            result = add_service_context(None, "info", {"event": "test_event"})

            assert result["service"] == "duologue"
            assert result["environment"] == "test"

    def test_preserves_existing_fields(self) -> None:
        """Test that fields already on the entry win."""
        with patch("duologue.core.logging.get_settings") as mock_settings:
            mock_settings.return_value.service_name = "duologue"
            mock_settings.return_value.environment = "test"

            result = add_service_context(None, "info", {"event": "Turn appended", "turn": 3, "service": "cli"})

            assert result["turn"] == 3
            assert result["service"] == "cli"


class TestConversationContext:
    """Tests for conversation_context."""

    def test_binds_fields_inside_block(self) -> None:
        """Test fields are bound only while the block runs."""
        with conversation_context(mode="debate"):
            assert structlog.contextvars.get_contextvars()["mode"] == "debate"

        assert "mode" not in structlog.contextvars.get_contextvars()

    def test_unbinds_on_error(self) -> None:
        try:
            with conversation_context(side="provider_a"):
                raise RuntimeError("provider failed")
        except RuntimeError:
            pass

        assert "side" not in structlog.contextvars.get_contextvars()
