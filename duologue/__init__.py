"""duologue - conversations between two language-model providers."""

from duologue.conversation import (
    ConversationConfig,
    ConversationMode,
    ConversationOrchestrator,
    EventName,
    Speaker,
)

__version__ = "0.1.0"

__all__ = [
    "ConversationConfig",
    "ConversationMode",
    "ConversationOrchestrator",
    "EventName",
    "Speaker",
    "__version__",
]
