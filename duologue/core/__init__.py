"""Core module - Configuration, logging, constants, and exceptions.

Exports:
    - Settings, get_settings: Pydantic Settings configuration
    - configure_logging, get_logger: Structured logging (structlog)
    - Exception classes: DuologueError, ProviderError, etc.
"""

from duologue.core.config import Settings, get_settings
from duologue.core.constants import (
    CHARS_PER_TOKEN,
    COMPACTION_THRESHOLD,
    DEFAULT_KEEP_RECENT_COUNT,
    MAX_CONTEXT_TOKENS,
    TRUNCATION_MARKER,
    estimate_tokens,
)
from duologue.core.exceptions import (
    ConversationInProgressError,
    DuologueError,
    OrchestratorError,
    ProviderConfigurationError,
    ProviderError,
    ProviderNotConfiguredError,
)
from duologue.core.logging import configure_logging, conversation_context, get_logger


__all__ = [
    # Constants
    "CHARS_PER_TOKEN",
    "COMPACTION_THRESHOLD",
    "DEFAULT_KEEP_RECENT_COUNT",
    "MAX_CONTEXT_TOKENS",
    "TRUNCATION_MARKER",
    # Exceptions
    "ConversationInProgressError",
    "DuologueError",
    "OrchestratorError",
    "ProviderConfigurationError",
    "ProviderError",
    "ProviderNotConfiguredError",
    # Configuration
    "Settings",
    # Logging
    "configure_logging",
    "conversation_context",
    "estimate_tokens",
    "get_logger",
    "get_settings",
]
