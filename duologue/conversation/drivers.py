"""Protocol drivers - the fixed call sequence of each conversation mode.

Drivers issue provider calls one at a time through a DriverSession (the
orchestrator). Each call checks the stop flag, emits a status event, awaits
the provider and appends a turn.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar, Protocol

from duologue.conversation import prompts
from duologue.conversation.events import EventName, SummaryNotice
from duologue.conversation.models import ConversationConfig, ConversationMode, Speaker
from duologue.core.logging import get_logger


if TYPE_CHECKING:
    from duologue.conversation.conclusion import ConclusionDetector
    from duologue.conversation.models import ConversationTurn, ProviderResponse
    from duologue.providers.base import ChatMessage


logger = get_logger(__name__)


class DriverSession(Protocol):
    """Orchestrator surface the drivers depend on."""

    @property
    def should_stop(self) -> bool: ...

    @property
    def conversation_history(self) -> list[ConversationTurn]: ...

    def label(self, side: Speaker) -> str: ...

    def build_messages(self, side: Speaker) -> list[ChatMessage]: ...

    def emit_status(self, side: Speaker, message: str, phase: str = "thinking") -> None: ...

    def emit(self, event: EventName, payload: object) -> None: ...

    async def send_to_provider(
        self,
        side: Speaker,
        messages: list[ChatMessage],
        system_prompt: str | None = None,
    ) -> ProviderResponse: ...

    def add_turn(
        self,
        speaker: Speaker,
        message: str,
        response: ProviderResponse | None = None,
        conversation_handle: str | None = None,
    ) -> ConversationTurn: ...


class ConversationDriver(ABC):
    """Base class for the multi-turn protocol drivers.

    Attributes:
        mode: The conversation mode this driver implements.
    """

    mode: ClassVar[ConversationMode]

    def __init__(
        self,
        session: DriverSession,
        config: ConversationConfig,
        conclusion_detector: ConclusionDetector,
    ) -> None:
        if config.max_turns is None:
            raise ValueError("driver requires a resolved max_turns")
        self.session = session
        self.config = config
        self.max_turns: int = config.max_turns
        self.conclusion_detector = conclusion_detector

    @abstractmethod
    async def run(self) -> None:
        """Run the driver's call sequence to completion, or until stopped."""

    async def _take_turn(
        self,
        side: Speaker,
        messages: list[ChatMessage],
        system_prompt: str | None,
        status_message: str,
    ) -> ProviderResponse | None:
        """Issue one provider call and append its turn.

        Returns:
            The response, or None if the session was stopped before the call.
        """
        if self.session.should_stop:
            logger.info("Driver stopped before call", mode=self.mode.value, side=side.value)
            return None

        self.session.emit_status(side, status_message)
        response = await self.session.send_to_provider(side, messages, system_prompt)
        self.session.add_turn(side, response.content, response)
        return response

    def _respond_to_previous(self, side: Speaker, directive: str) -> list[ChatMessage]:
        """Prior turns from side's point of view, followed by the directive."""
        messages = self.session.build_messages(side)
        messages.append({"role": "user", "content": directive})
        return messages

    def _previous_message(self) -> str:
        return self.session.conversation_history[-1].message

    @staticmethod
    def _side_for(turn_count: int) -> Speaker:
        return Speaker.PROVIDER_A if turn_count % 2 == 0 else Speaker.PROVIDER_B


class CodeReviewDriver(ConversationDriver):
    """Both sides review the same code independently, then discuss.

    The second review is deliberately not shown the first, to avoid anchoring.
    The discussion ends at max_turns or when a response reads as concluding.
    """

    mode = ConversationMode.CODE_REVIEW

    async def run(self) -> None:
        review_prompt = prompts.code_review_prompt(self.config.initial_context or "")

        for turn_count, side in enumerate((Speaker.PROVIDER_A, Speaker.PROVIDER_B)):
            if turn_count >= self.max_turns:
                return
            response = await self._take_turn(
                side,
                [{"role": "user", "content": review_prompt}],
                self.config.system_prompt_for(side),
                f"{self.session.label(side)} is reviewing the code...",
            )
            if response is None:
                return

        turn_count = 2
        while turn_count < self.max_turns:
            side = self._side_for(turn_count)
            directive = prompts.review_discussion_prompt(
                self.session.label(side.other),
                self._previous_message(),
            )
            response = await self._take_turn(
                side,
                self._respond_to_previous(side, directive),
                self.config.system_prompt_for(side),
                f"{self.session.label(side)} is responding...",
            )
            if response is None:
                return
            turn_count += 1

            if self.conclusion_detector.is_concluding(response.content):
                logger.info("Discussion concluded early", mode=self.mode.value, turns=turn_count)
                break


class DebateDriver(ConversationDriver):
    """Provider A argues in favour of the topic, provider B against.

    Always runs to max_turns: there is no conclusion early-exit in a debate.
    """

    mode = ConversationMode.DEBATE

    async def run(self) -> None:
        topic = self.config.topic or self.config.initial_context or ""

        for turn_count, side in enumerate((Speaker.PROVIDER_A, Speaker.PROVIDER_B)):
            if turn_count >= self.max_turns:
                return
            opening = prompts.debate_opening_prompt(topic, in_favor=side is Speaker.PROVIDER_A)
            response = await self._take_turn(
                side,
                [{"role": "user", "content": opening}],
                prompts.DEBATER_SYSTEM_PROMPT,
                f"{self.session.label(side)} is preparing opening statement...",
            )
            if response is None:
                return

        turn_count = 2
        while turn_count < self.max_turns:
            side = self._side_for(turn_count)
            response = await self._take_turn(
                side,
                self._respond_to_previous(side, prompts.debate_rebuttal_prompt(self._previous_message())),
                None,
                f"{self.session.label(side)} is formulating rebuttal...",
            )
            if response is None:
                return
            turn_count += 1


class CollaborationDriver(ConversationDriver):
    """Both sides build on each other's ideas about a shared problem.

    Provider A opens, provider B answers. The last allowed turn asks for
    concluding thoughts. Optionally summarizes the whole discussion afterwards.
    """

    mode = ConversationMode.COLLABORATE

    async def run(self) -> None:
        concise = self.config.is_concise
        problem = self.config.initial_context or self.config.topic or ""
        system_prompt = prompts.collaboration_system_prompt(concise)

        response = await self._take_turn(
            Speaker.PROVIDER_A,
            [{"role": "user", "content": prompts.collaboration_opening_prompt(problem, concise)}],
            system_prompt,
            f"{self.session.label(Speaker.PROVIDER_A)} is thinking about the problem...",
        )
        if response is None:
            return

        turn_count = 1
        while turn_count < self.max_turns:
            side = self._side_for(turn_count)
            directive = prompts.collaboration_continue_prompt(
                self._previous_message(),
                concise,
                final_turn=turn_count == self.max_turns - 1,
            )
            response = await self._take_turn(
                side,
                self._respond_to_previous(side, directive),
                system_prompt,
                f"{self.session.label(side)} is responding... ({turn_count + 1}/{self.max_turns})",
            )
            if response is None:
                return
            turn_count += 1

            if self.conclusion_detector.is_concluding(response.content):
                logger.info("Collaboration converged early", turns=turn_count)
                break

        if self.config.auto_summarize and not self.session.should_stop:
            await self._summarize()

    async def _summarize(self) -> None:
        """Summarize the transcript and emit it. Not appended as a turn."""
        self.session.emit_status(Speaker.PROVIDER_A, "Generating summary...", phase="summarizing")

        transcript = "\n\n---\n\n".join(
            f"{self.session.label(turn.speaker)}: {turn.message}"
            for turn in self.session.conversation_history
        )
        subject = self.config.topic or self.config.initial_context or "a problem"

        response = await self.session.send_to_provider(
            Speaker.PROVIDER_A,
            [{"role": "user", "content": prompts.discussion_summary_prompt(subject, transcript)}],
            prompts.SUMMARIZER_SYSTEM_PROMPT,
        )
        self.session.emit(EventName.SUMMARY, SummaryNotice(content=response.content, response=response))


DRIVERS: dict[ConversationMode, type[ConversationDriver]] = {
    driver.mode: driver
    for driver in (CodeReviewDriver, DebateDriver, CollaborationDriver)
}
