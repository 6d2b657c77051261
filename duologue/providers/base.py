"""Provider capability - the contract the orchestrator consumes.

A provider is any language-model backend that can answer a list of chat
messages, either in one response or as a stream of text chunks. Transport
(HTTP API, local CLI subprocess, test double) is the provider's concern.

Pattern: Protocol duck typing - enables fake providers in tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Literal, Optional, Protocol, TypedDict, runtime_checkable

from pydantic import BaseModel, Field


if TYPE_CHECKING:
    from duologue.conversation.models import ProviderResponse


class ChatMessage(TypedDict):
    """One chat message in the {role, content} wire shape."""

    role: Literal["user", "assistant", "system"]
    content: str


# Callback receiving each streamed text chunk verbatim
ChunkCallback = Callable[[str], None]


class ProviderOptions(BaseModel):
    """Options accepted by ProviderProtocol.configure().

    Attributes:
        base_url: Endpoint the provider talks to, when it has one.
        api_key: Credential passed through to the backend as-is.
        model: Model identifier to request.
        max_tokens: Maximum output tokens per response.
        temperature: Sampling temperature.
    """

    base_url: Optional[str] = None
    api_key: Optional[str] = None
    model: Optional[str] = None
    max_tokens: int = Field(default=4096, gt=0)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)


@runtime_checkable
class ProviderProtocol(Protocol):
    """Protocol for language-model providers.

    Uses @runtime_checkable for isinstance() support.

    Example:
        >>> class MyProvider:
        ...     is_configured = True
        ...     def configure(self, options): ...
        ...     async def send_message(self, messages, system_prompt=None): ...
        ...     async def stream_message(self, messages, system_prompt, on_chunk): ...
        >>>
        >>> isinstance(MyProvider(), ProviderProtocol)
        True
    """

    @property
    def is_configured(self) -> bool:
        """Whether the provider can accept calls."""
        ...

    def configure(self, options: ProviderOptions) -> None:
        """Apply configuration options.

        Raises:
            ProviderConfigurationError: If the options are rejected.
        """
        ...

    async def send_message(
        self,
        messages: list[ChatMessage],
        system_prompt: str | None = None,
    ) -> ProviderResponse:
        """Send messages and wait for the complete response.

        Raises:
            ProviderError: If the backend call fails.
        """
        ...

    async def stream_message(
        self,
        messages: list[ChatMessage],
        system_prompt: str | None,
        on_chunk: ChunkCallback,
    ) -> ProviderResponse:
        """Send messages, invoking on_chunk for each text chunk as it arrives.

        Returns:
            The complete response once the stream ends.

        Raises:
            ProviderError: If the backend call fails.
        """
        ...
