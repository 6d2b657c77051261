"""Unit tests for token estimation.

Estimates are ceil(len(text) / 4); the compaction summary always counts.
"""

from __future__ import annotations

import pytest

from duologue.conversation.tokens import TokenEstimator
from duologue.core.constants import estimate_tokens


class TestEstimateTokens:
    """Tests for the character-count heuristic."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("", 0),
            ("abcd", 1),
            ("abcde", 2),
            ("Hello world!", 3),
            ("x" * 400, 100),
        ],
    )
    def test_rounds_up(self, text: str, expected: int) -> None:
        """Partial tokens round up."""
        assert estimate_tokens(text) == expected

    def test_none_is_zero(self) -> None:
        """None counts as empty text."""
        assert estimate_tokens(None) == 0


class TestEstimateHistory:
    """Tests for TokenEstimator.estimate_history."""

    def test_sums_messages(self) -> None:
        """Each message is estimated separately and summed."""
        estimator = TokenEstimator()
        history = [
            {"role": "user", "content": "abcde"},       # 2
            {"role": "assistant", "content": "abcd"},   # 1
        ]

        assert estimator.estimate_history(history) == 3

    def test_counts_summary(self) -> None:
        """A compaction summary is always in context."""
        estimator = TokenEstimator()
        history = [{"role": "user", "content": "abcd"}]

        assert estimator.estimate_history(history, summary="x" * 8) == 3

    def test_empty_history_with_summary(self) -> None:
        """The summary is counted even without messages."""
        assert TokenEstimator().estimate_history(None, summary="abcd") == 1

    def test_missing_content_counts_zero(self) -> None:
        """Messages without content do not raise."""
        assert TokenEstimator().estimate_history([{"role": "user"}]) == 0
