"""
Conversation Orchestrator - Central two-provider conversation coordinator

Owns the turn log and the running/stop flags, dispatches start_conversation()
to the driver for the requested mode, and compacts solo-chat history.

start_conversation() is single-flight. stop() is cooperative: it only sets a
flag that drivers check before each provider call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Sequence

from duologue.conversation import prompts
from duologue.conversation.compactor import CompactionResult, ContextCompactor
from duologue.conversation.conclusion import ConclusionDetector, PhraseConclusionDetector
from duologue.conversation.drivers import DRIVERS
from duologue.conversation.events import EventEmitter, EventName, Listener, StatusUpdate, StreamChunk
from duologue.conversation.models import (
    CompactionState,
    ConversationConfig,
    ConversationMode,
    ConversationStats,
    ConversationTurn,
    ProviderResponse,
    Speaker,
)
from duologue.core.config import Settings, get_settings
from duologue.core.exceptions import ConversationInProgressError, ProviderNotConfiguredError
from duologue.core.logging import conversation_context, get_logger


if TYPE_CHECKING:
    from duologue.providers.base import ChatMessage, ProviderProtocol


logger = get_logger(__name__)

_PROVIDER_SIDES = (Speaker.PROVIDER_A, Speaker.PROVIDER_B)
_HISTORY_ROLES = ("user", "assistant")


class ConversationOrchestrator:
    """Central orchestrator for two-provider conversations.

    Example:
        >>> orchestrator = ConversationOrchestrator(planner, generalist)
        >>> orchestrator.on(EventName.TURN, print)
        >>> stats = await orchestrator.start_conversation(
        ...     ConversationConfig(mode="debate", topic="tabs vs spaces", max_turns=4)
        ... )
    """

    def __init__(
        self,
        provider_a: ProviderProtocol | None = None,
        provider_b: ProviderProtocol | None = None,
        *,
        settings: Settings | None = None,
        conclusion_detector: ConclusionDetector | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._providers: dict[Speaker, ProviderProtocol | None] = {
            Speaker.PROVIDER_A: provider_a,
            Speaker.PROVIDER_B: provider_b,
        }
        self._conclusion_detector = conclusion_detector or PhraseConclusionDetector()
        self._workspace_dir = self.settings.workspace_dir

        self._turns: list[ConversationTurn] = []
        self._running = False
        self._should_stop = False

        self._events = EventEmitter()
        self._compaction = CompactionState()
        self._compactor = ContextCompactor(
            providers=self._summarizer_preference,
            emitter=self._events,
            state=self._compaction,
            max_context_tokens=self.settings.max_context_tokens,
            threshold=self.settings.compaction_threshold,
        )

    # =========================================================================
    # Listeners
    # =========================================================================

    def on(self, event: EventName | str, listener: Listener) -> None:
        """Register a listener for an event."""
        self._events.on(event, listener)

    def off(self, event: EventName | str, listener: Listener) -> None:
        """Remove a listener."""
        self._events.off(event, listener)

    def emit(self, event: EventName, payload: Any) -> None:
        self._events.emit(event, payload)

    # =========================================================================
    # Providers and workspace
    # =========================================================================

    def set_providers(self, provider_a: ProviderProtocol | None, provider_b: ProviderProtocol | None) -> None:
        self._providers[Speaker.PROVIDER_A] = provider_a
        self._providers[Speaker.PROVIDER_B] = provider_b

    def get_provider(self, side: Speaker | str) -> ProviderProtocol | None:
        return self._providers.get(Speaker(side))

    def set_workspace_dir(self, workspace_dir: str | None) -> None:
        self._workspace_dir = workspace_dir

    @property
    def workspace_dir(self) -> str | None:
        return self._workspace_dir

    def label(self, side: Speaker) -> str:
        """Display label for a side: the provider's model id, else its configured name."""
        if side is Speaker.USER:
            return "User"
        model = getattr(self._providers.get(side), "model", None)
        if isinstance(model, str) and model:
            return model
        if side is Speaker.PROVIDER_A:
            return self.settings.provider_a_name
        return self.settings.provider_b_name

    def _is_configured(self, side: Speaker) -> bool:
        provider = self._providers.get(side)
        return provider is not None and provider.is_configured

    def _summarizer_preference(self) -> list[ProviderProtocol | None]:
        return [self._providers.get(side) for side in _PROVIDER_SIDES]

    # =========================================================================
    # Query surface
    # =========================================================================

    @property
    def conversation_history(self) -> list[ConversationTurn]:
        """Copy of the turn log."""
        return list(self._turns)

    @property
    def stats(self) -> ConversationStats:
        """Stats computed fresh from the turn log."""
        return ConversationStats.from_turns(self._turns)

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def should_stop(self) -> bool:
        return self._should_stop

    # =========================================================================
    # Compaction
    # =========================================================================

    @property
    def is_compacted(self) -> bool:
        return self._compaction.compacted

    @property
    def context_summary(self) -> str:
        return self._compaction.summary

    def estimate_history_tokens(self, history: Sequence[Mapping[str, str]] | None) -> int:
        """Estimated tokens in history, including the current compaction summary."""
        return self._compactor.estimate_history(history)

    def needs_compaction(self, history: Sequence[Mapping[str, str]] | None) -> bool:
        return self._compactor.needs_compaction(history)

    async def compact_history(
        self,
        history: Sequence[Mapping[str, str]],
        keep_recent_count: int | None = None,
    ) -> CompactionResult:
        """Replace all but the most recent messages with a summary.

        Never raises for summarization failures; see ContextCompactor.compact().
        """
        if keep_recent_count is None:
            keep_recent_count = self.settings.keep_recent_count
        return await self._compactor.compact(history, keep_recent_count)

    def reset_compaction(self) -> None:
        """Forget the accumulated summary."""
        self._compaction.reset()

    # =========================================================================
    # Conversations
    # =========================================================================

    async def start_conversation(self, config: ConversationConfig) -> ConversationStats:
        """Run a conversation in the configured mode.

        Solo mode has no driver. Returns the final stats, also emitted as
        a complete event.

        Raises:
            ConversationInProgressError: If a conversation is already running.
            ProviderNotConfiguredError: If a non-solo mode lacks a provider.
            ProviderError: If a provider call fails mid-run.
        """
        if self._running:
            raise ConversationInProgressError()

        if config.mode is not ConversationMode.SOLO:
            for side in _PROVIDER_SIDES:
                if not self._is_configured(side):
                    raise ProviderNotConfiguredError(side.value)

        if config.max_turns is None:
            config = config.model_copy(update={"max_turns": self.settings.default_max_turns})

        self._running = True
        self._should_stop = False
        self._turns = []

        logger.info("Conversation started", mode=config.mode.value, max_turns=config.max_turns)

        try:
            driver_cls = DRIVERS.get(config.mode)
            if driver_cls is not None:
                with conversation_context(mode=config.mode.value):
                    await driver_cls(self, config, self._conclusion_detector).run()

            stats = self.stats
            logger.info(
                "Conversation complete",
                mode=config.mode.value,
                turns=stats.total_turns,
                stopped=self._should_stop,
            )
            self.emit(EventName.COMPLETE, stats)
            return stats
        except Exception as e:
            logger.error("Conversation failed", mode=config.mode.value, turns=len(self._turns), error=str(e))
            self.emit(EventName.ERROR, e)
            raise
        finally:
            self._running = False

    def stop(self) -> None:
        """Request the running conversation to stop before its next provider call."""
        self._should_stop = True
        logger.info("Stop requested", running=self._running)

    def clear(self) -> None:
        """Reset the turn log and stop flag. Must not be called while running."""
        self._turns = []
        self._should_stop = False

    async def ask_single(
        self,
        side: Speaker | str,
        message: str,
        system_prompt: str | None = None,
        history: Sequence[Mapping[str, str]] | None = None,
        conversation_handle: str | None = None,
    ) -> ProviderResponse:
        """Send one message to one provider and stream the answer.

        Only user and assistant history is forwarded. History over the
        context budget is compacted first; the summary travels in the system
        prompt.

        Raises:
            ProviderNotConfiguredError: If the addressed provider is unavailable.
            ProviderError: If the provider call fails.
        """
        side = Speaker(side)
        provider = self._providers.get(side)
        if provider is None or not provider.is_configured:
            raise ProviderNotConfiguredError(side.value)

        prior = [dict(m) for m in (history or []) if m.get("role") in _HISTORY_ROLES]
        if self.needs_compaction(prior):
            prior = (await self.compact_history(prior)).messages

        self.emit_status(side, f"{self.label(side)} is thinking...")

        messages: list[ChatMessage] = [{"role": m["role"], "content": m["content"]} for m in prior]
        messages.append({"role": "user", "content": message})

        logger.debug("Solo request", side=side.value, messages=len(messages), handle=conversation_handle)

        def forward_chunk(text: str) -> None:
            self.emit(EventName.CHUNK, StreamChunk(side=side.value, text=text, conversation_handle=conversation_handle))

        with conversation_context(side=side.value, conversation_handle=conversation_handle):
            response = await provider.stream_message(messages, self._solo_system_prompt(system_prompt), forward_chunk)
        self.add_turn(side, response.content, response, conversation_handle)
        return response

    # =========================================================================
    # Driver surface
    # =========================================================================

    def add_turn(
        self,
        speaker: Speaker,
        message: str,
        response: ProviderResponse | None = None,
        conversation_handle: str | None = None,
    ) -> ConversationTurn:
        """Append a turn to the log and emit it."""
        turn = ConversationTurn(
            turn_number=len(self._turns) + 1,
            speaker=Speaker(speaker),
            message=message,
            response=response,
            conversation_handle=conversation_handle,
        )
        self._turns.append(turn)
        logger.debug("Turn appended", turn=turn.turn_number, speaker=turn.speaker.value)
        self.emit(EventName.TURN, turn)
        return turn

    def build_messages(self, side: Speaker) -> list[ChatMessage]:
        """The turn log from side's point of view.

        side's own turns become assistant messages; everything else is a
        user message, in chronological order.
        """
        return [
            {"role": "assistant" if turn.speaker is side else "user", "content": turn.message}
            for turn in self._turns
        ]

    def emit_status(self, side: Speaker, message: str, phase: str = "thinking") -> None:
        self.emit(EventName.STATUS, StatusUpdate(side=Speaker(side).value, phase=phase, message=message))

    async def send_to_provider(
        self,
        side: Speaker,
        messages: list[ChatMessage],
        system_prompt: str | None = None,
    ) -> ProviderResponse:
        """Send messages to a side's provider with workspace context applied."""
        provider = self._providers.get(side)
        if provider is None:
            raise ProviderNotConfiguredError(side.value, f"{side.value} provider not set")
        return await provider.send_message(messages, self._with_workspace(system_prompt))

    def _with_workspace(self, system_prompt: str | None) -> str | None:
        context = prompts.workspace_context(self._workspace_dir)
        if system_prompt:
            return f"{context}{system_prompt}"
        return context.strip() or None

    def _solo_system_prompt(self, system_prompt: str | None) -> str | None:
        parts = [system_prompt] if system_prompt else []
        if self._compaction.summary:
            parts.append(prompts.compaction_context(self._compaction.summary))
        return self._with_workspace("\n\n".join(parts) or None)
