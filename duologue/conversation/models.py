"""
Conversation Models - Data structures for two-provider conversations

This module defines the records exchanged between the orchestrator, its
providers and its listeners:

- ProviderResponse: one completed provider call
- ConversationTurn: one attributed entry in the append-only turn log
- ConversationConfig: parameters for one start_conversation() run
- CompactionState: accumulated summary of compacted history
- ConversationStats: projection of the turn log, never stored
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field


class Speaker(str, Enum):
    """Author of a turn."""

    PROVIDER_A = "provider_a"      # Planning-oriented provider
    PROVIDER_B = "provider_b"      # General-purpose provider
    USER = "user"

    @property
    def other(self) -> Speaker:
        """The opposing provider side. USER has no opponent."""
        if self is Speaker.PROVIDER_A:
            return Speaker.PROVIDER_B
        if self is Speaker.PROVIDER_B:
            return Speaker.PROVIDER_A
        raise ValueError("user has no opposing side")


class ConversationMode(str, Enum):
    """Interaction protocol for one conversation."""

    CODE_REVIEW = "code-review"
    DEBATE = "debate"
    COLLABORATE = "collaborate"
    SOLO = "solo"


class ResponseStyle(str, Enum):
    """Prompt wording style. Shapes prompts, not enforced structurally."""

    CONCISE = "concise"
    DETAILED = "detailed"


@dataclass(frozen=True)
class TokenUsage:
    """Input and output token counts."""

    input: int = 0
    output: int = 0

    def __add__(self, other: TokenUsage) -> TokenUsage:
        return TokenUsage(self.input + other.input, self.output + other.output)


@dataclass(frozen=True)
class ProviderResponse:
    """Result of one provider call.

    Attributes:
        content: Full response text.
        model: Model that produced the response.
        tokens: Token usage reported (or estimated) for the call.
        cost: Cost in USD.
        latency_ms: Wall-clock time of the call.
        provider: Name of the provider backend, if known.
    """

    content: str
    model: str
    tokens: TokenUsage = field(default_factory=TokenUsage)
    cost: float = 0.0
    latency_ms: int = 0
    provider: str | None = None


@dataclass(frozen=True)
class ConversationTurn:
    """Single entry in the conversation log.

    Attributes:
        turn_number: 1 + number of turns before this one.
        speaker: Who authored the message.
        message: Full content, never truncated.
        response: Provider response, present only for provider-authored turns.
        timestamp: When the turn was appended (UTC).
        conversation_handle: Caller-defined chat identifier, for interleaved chats.
    """

    turn_number: int
    speaker: Speaker
    message: str
    response: ProviderResponse | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    conversation_handle: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data: dict[str, Any] = {
            "turn_number": self.turn_number,
            "speaker": self.speaker.value,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
            "conversation_handle": self.conversation_handle,
            "response": None,
        }
        if self.response:
            data["response"] = {
                "model": self.response.model,
                "tokens": {
                    "input": self.response.tokens.input,
                    "output": self.response.tokens.output,
                },
                "cost": self.response.cost,
                "latency_ms": self.response.latency_ms,
                "provider": self.response.provider,
            }
        return data


class ConversationConfig(BaseModel):
    """Parameters for one start_conversation() invocation.

    Attributes:
        mode: Interaction protocol to run.
        max_turns: Hard upper bound on driver-authored turns. Ignored in solo
            mode. None means the configured default.
        initial_context: Code or problem statement (code review, collaborate).
        topic: Debate topic, or a label for the discussion.
        response_style: Concise or detailed prompt wording.
        auto_summarize: Collaborate only; emit a summary after the run.
        provider_a_system_prompt: Optional system prompt for provider A.
        provider_b_system_prompt: Optional system prompt for provider B.
    """

    model_config = ConfigDict(frozen=True)

    mode: ConversationMode
    max_turns: Optional[int] = Field(default=None, ge=1)
    initial_context: Optional[str] = None
    topic: Optional[str] = None
    response_style: ResponseStyle = ResponseStyle.CONCISE
    auto_summarize: bool = False
    provider_a_system_prompt: Optional[str] = None
    provider_b_system_prompt: Optional[str] = None

    @property
    def is_concise(self) -> bool:
        """True unless the detailed style was requested."""
        return self.response_style is not ResponseStyle.DETAILED

    def system_prompt_for(self, side: Speaker) -> str | None:
        """Per-side system prompt, if one was supplied."""
        if side is Speaker.PROVIDER_A:
            return self.provider_a_system_prompt
        return self.provider_b_system_prompt


@dataclass
class CompactionState:
    """Summary of compacted history.

    Persists across conversations for the lifetime of one orchestrator.
    Invariant: compacted implies a non-empty summary.
    """

    summary: str = ""
    compacted: bool = False

    def record(self, summary: str) -> None:
        """Store a summary and mark the history as compacted."""
        if not summary:
            raise ValueError("compaction summary cannot be empty")
        self.summary = summary
        self.compacted = True

    def reset(self) -> None:
        """Forget any accumulated summary."""
        self.summary = ""
        self.compacted = False


@dataclass(frozen=True)
class ConversationStats:
    """Aggregates over the turn log."""

    total_turns: int = 0
    provider_a_turns: int = 0
    provider_b_turns: int = 0
    total_tokens: TokenUsage = field(default_factory=TokenUsage)
    total_cost: float = 0.0
    total_latency_ms: int = 0

    @classmethod
    def from_turns(cls, turns: Iterable[ConversationTurn]) -> ConversationStats:
        """Project a sequence of turns into stats."""
        turns = list(turns)
        tokens = TokenUsage()
        cost = 0.0
        latency = 0
        for turn in turns:
            if turn.response:
                tokens = tokens + turn.response.tokens
                cost += turn.response.cost
                latency += turn.response.latency_ms

        return cls(
            total_turns=len(turns),
            provider_a_turns=sum(1 for t in turns if t.speaker is Speaker.PROVIDER_A),
            provider_b_turns=sum(1 for t in turns if t.speaker is Speaker.PROVIDER_B),
            total_tokens=tokens,
            total_cost=cost,
            total_latency_ms=latency,
        )
