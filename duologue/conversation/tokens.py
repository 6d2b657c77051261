"""Token estimation for conversation history.

A character-count heuristic, not a tokenizer: good enough to decide when
history is approaching a provider's context window.
"""

from __future__ import annotations

from typing import Iterable, Mapping

from duologue.core.constants import estimate_tokens


class TokenEstimator:
    """Estimates token counts for text and message histories."""

    def estimate(self, text: str | None) -> int:
        """Estimate tokens in a single text (ceil(len / 4))."""
        return estimate_tokens(text)

    def estimate_history(
        self,
        messages: Iterable[Mapping[str, str]] | None,
        summary: str = "",
    ) -> int:
        """Estimate tokens in a message history.

        The compaction summary, when present, is always in context and is
        counted alongside the messages.

        Args:
            messages: {role, content} messages. None counts as empty.
            summary: Current compaction summary.

        Returns:
            Total estimated tokens.
        """
        total = sum(self.estimate(message.get("content")) for message in (messages or []))
        if summary:
            total += self.estimate(summary)
        return total
