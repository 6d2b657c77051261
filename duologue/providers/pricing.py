"""Per-model token pricing.

Prices are USD per 1M tokens. Models missing from the table cost 0 so an
unknown model never breaks cost accounting.
"""

from __future__ import annotations


_CONST_TOKENS_PER_UNIT = 1_000_000

PRICING: dict[str, dict[str, float]] = {
    # Planning-oriented models
    "claude-opus-4-20250514": {"input": 15.0, "output": 75.0},
    "claude-sonnet-4-20250514": {"input": 3.0, "output": 15.0},
    "claude-3-5-haiku-20241022": {"input": 0.80, "output": 4.0},
    # General-purpose models
    "gpt-4o": {"input": 2.50, "output": 10.0},
    "gpt-4-turbo": {"input": 10.0, "output": 30.0},
    "gpt-4": {"input": 30.0, "output": 60.0},
    "gpt-3.5-turbo": {"input": 0.50, "output": 1.50},
    "o1-preview": {"input": 15.0, "output": 60.0},
    "o1-mini": {"input": 3.0, "output": 12.0},
}


def calculate_cost(model: str | None, input_tokens: int, output_tokens: int) -> float:
    """Calculate the cost of one call.

    Args:
        model: Model identifier.
        input_tokens: Prompt tokens billed.
        output_tokens: Completion tokens billed.

    Returns:
        Cost in USD, 0.0 for unknown models.

    Example:
        >>> calculate_cost("gpt-4o", 1_000_000, 0)
        2.5
    """
    pricing = PRICING.get(model or "")
    if not pricing:
        return 0.0

    input_cost = (input_tokens / _CONST_TOKENS_PER_UNIT) * pricing["input"]
    output_cost = (output_tokens / _CONST_TOKENS_PER_UNIT) * pricing["output"]
    return input_cost + output_cost
