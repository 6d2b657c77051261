"""Providers - language-model backends the orchestrator talks to."""

from duologue.providers.base import ChatMessage, ChunkCallback, ProviderOptions, ProviderProtocol
from duologue.providers.gateway import GatewayProvider
from duologue.providers.pricing import PRICING, calculate_cost

__all__ = [
    "ChatMessage",
    "ChunkCallback",
    "GatewayProvider",
    "PRICING",
    "ProviderOptions",
    "ProviderProtocol",
    "calculate_cost",
]
