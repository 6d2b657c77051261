"""Application configuration using Pydantic Settings.

Environment variables are loaded with the DUOLOGUE_ prefix. Every value has a
default in duologue.core.constants so the orchestrator works without any
environment configured.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from duologue.core.constants import (
    COMPACTION_THRESHOLD,
    DEFAULT_ENVIRONMENT,
    DEFAULT_KEEP_RECENT_COUNT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_TURNS,
    MAX_CONTEXT_TOKENS,
    Timeouts,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Service configuration
    service_name: str = "duologue"
    environment: str = Field(default=DEFAULT_ENVIRONMENT, description="Runtime environment")
    log_level: str = Field(default=DEFAULT_LOG_LEVEL, description="Logging level")

    # Context budget
    max_context_tokens: int = Field(
        default=MAX_CONTEXT_TOKENS,
        gt=0,
        description="Approximate provider context window in tokens"
    )
    compaction_threshold: float = Field(
        default=COMPACTION_THRESHOLD,
        gt=0.0,
        le=1.0,
        description="Fraction of max_context_tokens that triggers compaction"
    )
    keep_recent_count: int = Field(
        default=DEFAULT_KEEP_RECENT_COUNT,
        ge=0,
        description="Messages kept verbatim when history is compacted"
    )

    # Conversation defaults
    default_max_turns: int = Field(
        default=DEFAULT_MAX_TURNS,
        ge=1,
        description="max_turns used when a config does not set one"
    )
    workspace_dir: Optional[str] = Field(
        default=None,
        description="Project directory announced to providers in system prompts"
    )
    provider_a_name: str = Field(default="Planner", description="Display name of provider A")
    provider_b_name: str = Field(default="Generalist", description="Display name of provider B")

    # Gateway provider
    gateway_url: str = Field(
        default="http://localhost:8080",
        description="OpenAI-compatible gateway URL"
    )
    gateway_timeout_seconds: float = Field(
        default=Timeouts.HTTP_INFERENCE,
        description="Gateway request timeout"
    )

    model_config = SettingsConfigDict(
        env_prefix="DUOLOGUE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Application settings singleton
    """
    return Settings()
