"""Context compaction - keeps solo-chat history under the token budget.

Older messages are replaced by a provider-written summary; the most recent
ones are kept verbatim. If no provider can summarize, a truncation marker
stands in for the summary and nothing is raised.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Mapping, Sequence

from duologue.conversation.events import CompactionNotice, EventEmitter, EventName, StatusUpdate
from duologue.conversation.models import CompactionState
from duologue.conversation.prompts import COMPACTION_SYSTEM_PROMPT, compaction_prompt
from duologue.conversation.tokens import TokenEstimator
from duologue.core.constants import (
    COMPACTION_THRESHOLD,
    DEFAULT_KEEP_RECENT_COUNT,
    MAX_CONTEXT_TOKENS,
    SYSTEM_SIDE,
    TRUNCATION_MARKER,
)
from duologue.core.logging import get_logger


if TYPE_CHECKING:
    from duologue.providers.base import ProviderProtocol


logger = get_logger(__name__)

# Ordered providers to try for summarization, evaluated on every call
ProviderPreference = Callable[[], Sequence["ProviderProtocol | None"]]


@dataclass(frozen=True)
class CompactionResult:
    """Outcome of one compact() call.

    Attributes:
        messages: History to send from now on (the kept recent messages).
        summary: Summary of the dropped messages; empty when nothing was dropped.
    """

    messages: list[Mapping[str, str]]
    summary: str

    @property
    def applied(self) -> bool:
        """True if older messages were dropped."""
        return bool(self.summary)


def render_transcript(messages: Sequence[Mapping[str, str]]) -> str:
    """Render messages as an alternating Human/Assistant transcript."""
    return "\n\n".join(
        f"{'Human' if message.get('role') == 'user' else 'Assistant'}: {message.get('content', '')}"
        for message in messages
    )


class ContextCompactor:
    """Decides when history must shrink and produces the shortened history.

    Attributes:
        state: Compaction state shared with the owning orchestrator.
        max_context_tokens: Approximate context window size.
        threshold: Fraction of max_context_tokens that triggers compaction.
    """

    def __init__(
        self,
        providers: ProviderPreference,
        emitter: EventEmitter,
        state: CompactionState | None = None,
        *,
        estimator: TokenEstimator | None = None,
        max_context_tokens: int = MAX_CONTEXT_TOKENS,
        threshold: float = COMPACTION_THRESHOLD,
    ) -> None:
        self._providers = providers
        self._emitter = emitter
        self.state = state if state is not None else CompactionState()
        self._estimator = estimator or TokenEstimator()
        self.max_context_tokens = max_context_tokens
        self.threshold = threshold

    @property
    def threshold_tokens(self) -> float:
        """Token estimate above which compaction is needed."""
        return self.max_context_tokens * self.threshold

    def estimate_history(self, history: Sequence[Mapping[str, str]] | None) -> int:
        """Estimate tokens in history plus the current summary."""
        return self._estimator.estimate_history(history, self.state.summary)

    def needs_compaction(self, history: Sequence[Mapping[str, str]] | None) -> bool:
        return self.estimate_history(history) > self.threshold_tokens

    async def compact(
        self,
        history: Sequence[Mapping[str, str]],
        keep_recent_count: int = DEFAULT_KEEP_RECENT_COUNT,
    ) -> CompactionResult:
        """Summarize all but the most recent messages.

        History no longer than keep_recent_count is returned unchanged with
        an empty summary.

        Raises:
            ValueError: If keep_recent_count is negative.
        """
        if keep_recent_count < 0:
            raise ValueError("keep_recent_count cannot be negative")

        history = list(history)
        if len(history) <= keep_recent_count:
            return CompactionResult(messages=history, summary="")

        split = len(history) - keep_recent_count
        older, recent = history[:split], history[split:]

        self._emitter.emit(
            EventName.STATUS,
            StatusUpdate(side=SYSTEM_SIDE, phase="compacting", message="Compacting conversation history..."),
        )

        provider = self._select_provider()
        if provider is None:
            logger.warning("No provider available for summarization, truncating history", dropped=len(older))
            return self._truncate(recent)

        try:
            response = await provider.send_message(
                [{"role": "user", "content": compaction_prompt(render_transcript(older))}],
                COMPACTION_SYSTEM_PROMPT,
            )
        except Exception as e:
            logger.warning("Failed to compact history, truncating", error=str(e), dropped=len(older))
            return self._truncate(recent)

        if not response.content:
            logger.warning("Summarizer returned empty summary, truncating", dropped=len(older))
            return self._truncate(recent)

        self.state.record(response.content)
        logger.info("History compacted", dropped=len(older), kept=len(recent))

        self._emitter.emit(
            EventName.COMPACTED,
            CompactionNotice(
                summary=response.content,
                original_count=len(older),
                kept_count=len(recent),
            ),
        )
        return CompactionResult(messages=recent, summary=response.content)

    def _select_provider(self) -> ProviderProtocol | None:
        for provider in self._providers():
            if provider is not None and provider.is_configured:
                return provider
        return None

    def _truncate(self, recent: list[Mapping[str, str]]) -> CompactionResult:
        # Never overwrite an earlier summary with the marker
        if not self.state.compacted:
            self.state.record(TRUNCATION_MARKER)
        return CompactionResult(messages=recent, summary=TRUNCATION_MARKER)
