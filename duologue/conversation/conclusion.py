"""Conclusion detection for multi-turn discussions.

Drivers ask a ConclusionDetector whether the latest response signals that the
discussion has reached a natural end. The default strategy is a fixed phrase
match; any object with an is_concluding() method can replace it without
changing driver control flow.

A missed conclusion only costs extra turns up to max_turns.
"""

from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable


DEFAULT_CONCLUSION_PHRASES: tuple[str, ...] = (
    "i agree with all",
    "we seem to be in agreement",
    "i think we've covered",
    "to summarize our discussion",
    "in conclusion",
    "we've reached a consensus",
    "nothing more to add",
)


@runtime_checkable
class ConclusionDetector(Protocol):
    """Strategy deciding whether a response ends the discussion."""

    def is_concluding(self, text: str) -> bool:
        """Return True if the text signals a natural endpoint. Must not raise."""
        ...


class PhraseConclusionDetector:
    """Case-insensitive substring match against a set of phrases."""

    def __init__(self, phrases: Iterable[str] = DEFAULT_CONCLUSION_PHRASES) -> None:
        self._phrases = tuple(phrase.lower() for phrase in phrases)

    @property
    def phrases(self) -> tuple[str, ...]:
        return self._phrases

    def is_concluding(self, text: str) -> bool:
        lowered = (text or "").lower()
        return any(phrase in lowered for phrase in self._phrases)

