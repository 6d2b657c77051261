"""Shared constants and default configuration values.

Provides centralized defaults for:
- Context budget and compaction
- Conversation limits
- Timeouts

Settings in duologue.core.config override these at runtime.
"""

import math


# =============================================================================
# Token Estimation Constants (S1192 - No Duplicated Literals)
# =============================================================================

# Characters per token for budget estimation
# Industry standard approximation: 1 token ≈ 4 characters
CHARS_PER_TOKEN: int = 4


def estimate_tokens(text: str | None) -> int:
    """Estimate token count for text.

    Uses the approximation of ~4 characters per token, rounded up so that
    any non-empty text counts as at least one token.

    Args:
        text: Text to estimate tokens for. None counts as empty.

    Returns:
        Estimated token count.

    Example:
        >>> estimate_tokens("Hello world!")  # 12 chars
        3
        >>> estimate_tokens("Hello")  # 5 chars
        2
    """
    return math.ceil(len(text or "") / CHARS_PER_TOKEN)


# =============================================================================
# Context Compaction Defaults
# =============================================================================

# Approximate max tokens before compaction
MAX_CONTEXT_TOKENS: int = 100_000

# Trigger compaction at 75% of max
COMPACTION_THRESHOLD: float = 0.75

# Messages kept verbatim when older history is summarized
DEFAULT_KEEP_RECENT_COUNT: int = 4

# Summary used when summarization is unavailable or fails
TRUNCATION_MARKER = "[Previous conversation context was truncated due to length]"


# =============================================================================
# Conversation Defaults
# =============================================================================

DEFAULT_MAX_TURNS = 6

# Side label used in status events that no provider owns
SYSTEM_SIDE = "system"


# =============================================================================
# Default Timeout Values
# =============================================================================

class Timeouts:
    """Default timeout values in seconds.

    These can be overridden via Settings.
    """
    HTTP_DEFAULT: float = 30.0
    HTTP_INFERENCE: float = 120.0  # LLM calls can be slow


# =============================================================================
# Default Configuration Values
# =============================================================================

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_ENVIRONMENT = "development"
