"""Unit tests for core configuration.

Pattern: Pydantic Settings testing
"""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from duologue.core.config import Settings, get_settings


class TestSettings:
    """Tests for Settings configuration class."""

    def test_settings_default_values(self) -> None:
        """Test that Settings has sensible defaults.

        Note: Environment variables may override defaults, so we check the
        Field defaults from the model rather than instantiated values.
        """
        fields = Settings.model_fields
        assert fields["max_context_tokens"].default == 100_000
        assert fields["compaction_threshold"].default == 0.75
        assert fields["keep_recent_count"].default == 4
        assert fields["default_max_turns"].default == 6
        assert fields["gateway_url"].default == "http://localhost:8080"
        assert fields["log_level"].default == "INFO"
        assert fields["environment"].default == "development"

    def test_settings_from_environment(self) -> None:
        """Test that Settings loads from environment variables."""
        env_vars = {
            "DUOLOGUE_MAX_CONTEXT_TOKENS": "200000",
            "DUOLOGUE_COMPACTION_THRESHOLD": "0.5",
            "DUOLOGUE_WORKSPACE_DIR": "/srv/project",
            "DUOLOGUE_PROVIDER_A_NAME": "Architect",
            "DUOLOGUE_LOG_LEVEL": "DEBUG",
        }

        with patch.dict(os.environ, env_vars, clear=False):
            settings = Settings(_env_file=None)

            assert settings.max_context_tokens == 200_000
            assert settings.compaction_threshold == 0.5
            assert settings.workspace_dir == "/srv/project"
            assert settings.provider_a_name == "Architect"
            assert settings.log_level == "DEBUG"

    def test_settings_env_prefix(self) -> None:
        """Test that Settings uses DUOLOGUE_ prefix correctly."""
        env_vars = {
            "KEEP_RECENT_COUNT": "9",
            "DUOLOGUE_KEEP_RECENT_COUNT": "2",
        }

        with patch.dict(os.environ, env_vars, clear=False):
            settings = Settings(_env_file=None)

            assert settings.keep_recent_count == 2

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("max_context_tokens", 0),
            ("compaction_threshold", 0.0),
            ("compaction_threshold", 1.5),
            ("keep_recent_count", -1),
            ("default_max_turns", 0),
        ],
    )
    def test_settings_rejects_invalid_budget(self, field: str, value: float) -> None:
        """Test that budget values are validated."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: value})

    def test_settings_timeout_defaults(self) -> None:
        """Test timeout configuration defaults."""
        settings = Settings(_env_file=None)

        assert settings.gateway_timeout_seconds >= 30


class TestGetSettings:
    """Tests for get_settings cached factory."""

    def test_get_settings_returns_settings(self) -> None:
        """Test that get_settings returns a Settings instance."""
        get_settings.cache_clear()

        settings = get_settings()

        assert isinstance(settings, Settings)

    def test_get_settings_is_cached(self) -> None:
        """Test that get_settings returns the same instance (cached)."""
        get_settings.cache_clear()

        assert get_settings() is get_settings()
