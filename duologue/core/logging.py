"""Structured logging for duologue.

Every module logs through get_logger() with keyword context, e.g.
``logger.info("Turn appended", turn=3, speaker="provider_a")``.

Entries carry the service name and environment. While a conversation or a
solo exchange is running, the orchestrator binds its mode (or side and
conversation handle) with conversation_context(), so provider and compactor
logs emitted inside it are attributable without passing ids around.

Output is JSON in production and staging, colored console text otherwise.
"""

import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterator

import structlog
from structlog.types import Processor

from duologue.core.config import Settings, get_settings


_JSON_ENVIRONMENTS = ("production", "staging")
_NOISY_LOGGERS = ("httpx", "httpcore")

_configured = False

# Convenience type alias
Logger = structlog.BoundLogger


def add_service_context(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """structlog processor adding service and environment to every entry."""
    settings = get_settings()
    event_dict.setdefault("service", settings.service_name)
    event_dict.setdefault("environment", settings.environment)
    return event_dict


def _build_processors(environment: str) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_service_context,
        structlog.processors.StackInfoRenderer(),
    ]
    if environment in _JSON_ENVIRONMENTS:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    return processors


def configure_logging(settings: Settings | None = None, *, force: bool = False) -> None:
    """Configure structlog and the stdlib root logger.

    Safe to call more than once; later calls are no-ops unless force is set.

    Args:
        settings: Settings to read environment and log level from.
            Uses get_settings() if not provided.
        force: Reconfigure even if logging was already configured.
    """
    global _configured
    if _configured and not force:
        return

    settings = settings or get_settings()
    level = logging.getLevelName(settings.log_level.upper())

    structlog.configure(
        processors=_build_processors(settings.environment),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Third-party libraries log through the stdlib
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True


@contextmanager
def conversation_context(**fields: Any) -> Iterator[None]:
    """Bind fields to every log entry emitted inside the block.

    Example:
        ```python
        with conversation_context(mode="debate"):
            logger.info("Turn appended", turn=1)  # includes mode="debate"
        ```
    """
    with structlog.contextvars.bound_contextvars(**fields):
        yield


def get_logger(name: str | None = None) -> Logger:
    """Get a structured logger instance.

    Args:
        name: Optional logger name (module name recommended).

    Returns:
        structlog BoundLogger.
    """
    return structlog.get_logger(name)
