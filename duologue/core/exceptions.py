"""Custom exceptions for duologue.

All exceptions are namespaced to avoid shadowing Python builtins and share
DuologueError as a common root so callers can catch everything with one
except clause.

Two kinds of error reach callers:
- Precondition errors (OrchestratorError subclasses), raised before any
  state is touched. Retrying without fixing configuration will fail again.
- Provider call failures (ProviderError), raised by provider
  implementations and propagated unchanged out of the conversation drivers.
"""


class DuologueError(Exception):
    """Base exception for all duologue errors."""

    def __init__(self, message: str) -> None:
        """Initialize error.

        Args:
            message: Error description
        """
        super().__init__(message)


class OrchestratorError(DuologueError):
    """Raised when the orchestrator refuses an operation."""


class ConversationInProgressError(OrchestratorError):
    """Raised when start_conversation is called while a run is active.

    The orchestrator is single-flight: there is no queuing.
    """

    def __init__(self, message: str = "Conversation already in progress") -> None:
        super().__init__(message)


class ProviderNotConfiguredError(OrchestratorError):
    """Raised when an operation needs a provider that is missing or unconfigured."""

    def __init__(self, side: str, message: str | None = None) -> None:
        """Initialize not-configured error.

        Args:
            side: The side whose provider is unavailable
            message: Optional override for the default message
        """
        self.side = side
        super().__init__(message or f"{side} provider not configured")


class ProviderError(DuologueError):
    """Raised when a provider call fails.

    Carries enough context for the caller to decide whether to retry,
    restart, or surface the failure.
    """

    def __init__(
        self,
        message: str,
        provider: str,
        model: str | None = None,
        status_code: int | None = None,
        error_code: str | None = None,
    ) -> None:
        """Initialize provider error.

        Args:
            message: Error description
            provider: Name of the provider that failed
            model: Model that was requested
            status_code: HTTP status code if applicable
            error_code: Provider-specific error code if reported
        """
        self.provider = provider
        self.model = model
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(message)


class ProviderConfigurationError(DuologueError):
    """Raised when a provider rejects its configuration options."""

    def __init__(self, message: str, provider: str, field: str | None = None) -> None:
        """Initialize configuration error.

        Args:
            message: Error description
            provider: Name of the provider being configured
            field: The option that failed validation
        """
        self.provider = provider
        self.field = field
        super().__init__(message)
