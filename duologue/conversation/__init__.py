"""
Conversation Module - Two-provider conversation orchestration

Architecture:
- ConversationOrchestrator: owns the turn log and dispatches to drivers
- Drivers: code review, debate and collaboration call sequences
- ContextCompactor: keeps solo-chat history under the token budget
- EventEmitter: per-orchestrator listener registry
"""

from duologue.conversation.compactor import CompactionResult, ContextCompactor
from duologue.conversation.conclusion import ConclusionDetector, PhraseConclusionDetector
from duologue.conversation.events import (
    CompactionNotice,
    EventName,
    StatusUpdate,
    StreamChunk,
    SummaryNotice,
)
from duologue.conversation.models import (
    CompactionState,
    ConversationConfig,
    ConversationMode,
    ConversationStats,
    ConversationTurn,
    ProviderResponse,
    ResponseStyle,
    Speaker,
    TokenUsage,
)
from duologue.conversation.orchestrator import ConversationOrchestrator
from duologue.conversation.tokens import TokenEstimator

__all__ = [
    "CompactionNotice",
    "CompactionResult",
    "CompactionState",
    "ConclusionDetector",
    "ContextCompactor",
    "ConversationConfig",
    "ConversationMode",
    "ConversationOrchestrator",
    "ConversationStats",
    "ConversationTurn",
    "EventName",
    "PhraseConclusionDetector",
    "ProviderResponse",
    "ResponseStyle",
    "Speaker",
    "StatusUpdate",
    "StreamChunk",
    "SummaryNotice",
    "TokenEstimator",
    "TokenUsage",
]
