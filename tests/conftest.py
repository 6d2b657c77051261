"""Test configuration and shared fixtures.

Pattern: Pytest fixtures, conftest.py
"""

import pytest

from duologue.conversation.events import EventName
from duologue.conversation.orchestrator import ConversationOrchestrator
from duologue.core.config import Settings
from tests.fakes.fake_providers import FakeProvider


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def test_settings() -> Settings:
    """Create test settings with safe defaults, independent of the environment."""
    return Settings(
        environment="test",
        log_level="DEBUG",
        max_context_tokens=100_000,
        compaction_threshold=0.75,
        keep_recent_count=4,
        default_max_turns=6,
        workspace_dir=None,
        provider_a_name="Planner",
        provider_b_name="Generalist",
        _env_file=None,
    )


# ============================================================================
# Provider Fixtures
# ============================================================================

@pytest.fixture
def provider_a() -> FakeProvider:
    """Planning-oriented fake provider."""
    return FakeProvider("planner")


@pytest.fixture
def provider_b() -> FakeProvider:
    """General-purpose fake provider."""
    return FakeProvider("generalist")


# ============================================================================
# Orchestrator Fixtures
# ============================================================================

@pytest.fixture
def orchestrator(
    provider_a: FakeProvider,
    provider_b: FakeProvider,
    test_settings: Settings,
) -> ConversationOrchestrator:
    """Orchestrator wired to the two fake providers."""
    return ConversationOrchestrator(provider_a, provider_b, settings=test_settings)


class EventRecorder:
    """Collects (event, payload) pairs in emission order."""

    def __init__(self, orchestrator: ConversationOrchestrator) -> None:
        self.events: list[tuple[EventName, object]] = []
        for name in EventName:
            orchestrator.on(name, lambda payload, name=name: self.events.append((name, payload)))

    def of(self, name: EventName) -> list[object]:
        return [payload for event, payload in self.events if event is name]

    def names(self) -> list[EventName]:
        return [event for event, _ in self.events]


@pytest.fixture
def recorder(orchestrator: ConversationOrchestrator) -> EventRecorder:
    """Records every event the orchestrator emits."""
    return EventRecorder(orchestrator)
