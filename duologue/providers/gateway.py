"""
Gateway Provider - Calls a language model through an OpenAI-compatible gateway.

The gateway handles vendor routing, credentials and rate limiting; this
provider only speaks the /v1/chat/completions wire format, both as a single
JSON response and as a server-sent event stream.

Each provider instance is independent - if one backend fails, that provider
raises ProviderError and the orchestrator decides what happens next. There is
no fallback between providers.
"""

from __future__ import annotations

import json
import time
from typing import Any

import httpx

from duologue.conversation.models import ProviderResponse, TokenUsage
from duologue.core.config import Settings, get_settings
from duologue.core.constants import estimate_tokens
from duologue.core.exceptions import ProviderConfigurationError, ProviderError
from duologue.core.logging import get_logger
from duologue.providers.base import ChatMessage, ChunkCallback, ProviderOptions
from duologue.providers.pricing import calculate_cost


logger = get_logger(__name__)

_CONST_COMPLETIONS_PATH = "/v1/chat/completions"
_CONST_SSE_DATA_PREFIX = "data:"
_CONST_SSE_DONE = "[DONE]"


class GatewayProvider:
    """Provider backed by an OpenAI-compatible chat completions gateway.

    Satisfies ProviderProtocol via duck typing.

    Attributes:
        name: Provider name reported in responses and errors.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        name: str,
        options: ProviderOptions | None = None,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the gateway provider.

        Args:
            name: Provider name, e.g. "planner".
            options: Optional initial configuration.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (tests inject MockTransport).
        """
        self.name = name
        self.timeout = timeout
        self._options = ProviderOptions()
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        if options is not None:
            self.configure(options)

    @classmethod
    def from_settings(
        cls,
        name: str,
        model: str,
        settings: Settings | None = None,
        api_key: str | None = None,
    ) -> GatewayProvider:
        """Create a provider for the gateway named in settings.

        Example:
            >>> planner = GatewayProvider.from_settings("planner", "claude-sonnet-4-20250514")
        """
        settings = settings or get_settings()
        return cls(
            name,
            ProviderOptions(base_url=settings.gateway_url, api_key=api_key, model=model),
            timeout=settings.gateway_timeout_seconds,
        )

    @property
    def is_configured(self) -> bool:
        """A gateway URL and a model are required before calls can be made."""
        return bool(self._options.base_url and self._options.model)

    @property
    def model(self) -> str | None:
        """Configured model identifier."""
        return self._options.model

    def configure(self, options: ProviderOptions) -> None:
        """Apply configuration options.

        Args:
            options: Gateway URL, model and sampling options.

        Raises:
            ProviderConfigurationError: If the gateway URL is not http(s).
        """
        if options.base_url and not options.base_url.startswith(("http://", "https://")):
            raise ProviderConfigurationError(
                f"Invalid gateway URL: {options.base_url}",
                provider=self.name,
                field="base_url",
            )
        base_url = options.base_url.rstrip("/") if options.base_url else None
        self._options = options.model_copy(update={"base_url": base_url})
        logger.info("Provider configured", provider=self.name, model=options.model)

    async def send_message(
        self,
        messages: list[ChatMessage],
        system_prompt: str | None = None,
    ) -> ProviderResponse:
        """Send messages and return the complete response.

        Raises:
            ProviderError: On HTTP status >= 400, transport failure or a
                malformed response body.
        """
        self._require_configured()
        body = self._build_request(messages, system_prompt, stream=False)
        start = time.monotonic()

        logger.info("Calling gateway", provider=self.name, model=self.model, messages=len(body["messages"]))

        try:
            response = await self._client.post(self._url, json=body, headers=self._headers)
        except httpx.HTTPError as e:
            raise self._transport_error(e) from e

        if response.status_code >= 400:
            raise self._status_error(response.status_code, response.content)

        try:
            data = response.json()
            content = ""
            if data.get("choices"):
                content = data["choices"][0].get("message", {}).get("content") or ""
        except (ValueError, AttributeError) as e:
            raise self._malformed_error(e) from e

        return self._finish(body, content, data.get("usage"), data.get("model"), start)

    async def stream_message(
        self,
        messages: list[ChatMessage],
        system_prompt: str | None,
        on_chunk: ChunkCallback,
    ) -> ProviderResponse:
        """Stream the response, forwarding each content delta to on_chunk.

        Raises:
            ProviderError: On HTTP status >= 400, transport failure or a
                malformed response body.
        """
        self._require_configured()
        body = self._build_request(messages, system_prompt, stream=True)
        start = time.monotonic()
        parts: list[str] = []
        usage: dict[str, Any] | None = None
        actual_model: str | None = None

        logger.info("Streaming from gateway", provider=self.name, model=self.model)

        try:
            async with self._client.stream("POST", self._url, json=body, headers=self._headers) as response:
                if response.status_code >= 400:
                    raise self._status_error(response.status_code, await response.aread())

                async for line in response.aiter_lines():
                    if not line.startswith(_CONST_SSE_DATA_PREFIX):
                        continue
                    payload = line[len(_CONST_SSE_DATA_PREFIX):].strip()
                    if payload == _CONST_SSE_DONE:
                        break

                    try:
                        event = json.loads(payload)
                    except ValueError as e:
                        raise self._malformed_error(e) from e
                    actual_model = event.get("model") or actual_model
                    if event.get("usage"):
                        usage = event["usage"]
                    for choice in event.get("choices") or []:
                        delta = (choice.get("delta") or {}).get("content")
                        if delta:
                            parts.append(delta)
                            on_chunk(delta)
        except httpx.HTTPError as e:
            raise self._transport_error(e) from e

        return self._finish(body, "".join(parts), usage, actual_model, start)

    async def health_check(self) -> bool:
        """Check if the gateway is reachable.

        Returns:
            True if healthy, False otherwise.
        """
        if not self._options.base_url:
            return False
        try:
            response = await self._client.get(f"{self._options.base_url}/health")
            return response.status_code == 200
        except httpx.HTTPError:
            return False

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    @property
    def _url(self) -> str:
        return f"{self._options.base_url}{_CONST_COMPLETIONS_PATH}"

    @property
    def _headers(self) -> dict[str, str]:
        if self._options.api_key:
            return {"Authorization": f"Bearer {self._options.api_key}"}
        return {}

    def _require_configured(self) -> None:
        if not self.is_configured:
            raise ProviderError("Provider is not configured", provider=self.name, model=self.model)

    def _build_request(
        self,
        messages: list[ChatMessage],
        system_prompt: str | None,
        stream: bool,
    ) -> dict[str, Any]:
        """Build the chat completions request body."""
        wire_messages: list[dict[str, str]] = []
        if system_prompt:
            wire_messages.append({"role": "system", "content": system_prompt})
        wire_messages.extend({"role": m["role"], "content": m["content"]} for m in messages)

        body: dict[str, Any] = {
            "model": self._options.model,
            "messages": wire_messages,
            "temperature": self._options.temperature,
            "max_tokens": self._options.max_tokens,
        }
        if stream:
            body["stream"] = True
            body["stream_options"] = {"include_usage": True}
        return body

    def _finish(
        self,
        body: dict[str, Any],
        content: str,
        usage: dict[str, Any] | None,
        actual_model: str | None,
        start: float,
    ) -> ProviderResponse:
        """Assemble the response, estimating tokens when the gateway omits usage."""
        if usage:
            tokens = TokenUsage(
                input=int(usage.get("prompt_tokens", 0)),
                output=int(usage.get("completion_tokens", 0)),
            )
        else:
            tokens = TokenUsage(
                input=sum(estimate_tokens(m["content"]) for m in body["messages"]),
                output=estimate_tokens(content),
            )

        model = actual_model or self._options.model or "unknown"
        elapsed_ms = int((time.monotonic() - start) * 1000)

        logger.info(
            "Gateway response received",
            provider=self.name,
            model=model,
            input_tokens=tokens.input,
            output_tokens=tokens.output,
            latency_ms=elapsed_ms,
        )

        return ProviderResponse(
            content=content,
            model=model,
            tokens=tokens,
            cost=calculate_cost(model, tokens.input, tokens.output),
            latency_ms=elapsed_ms,
            provider=self.name,
        )

    def _status_error(self, status_code: int, raw: bytes) -> ProviderError:
        """Translate an error response into ProviderError."""
        error_msg = raw.decode("utf-8", errors="replace") if raw else f"HTTP {status_code}"
        error_code = None
        try:
            error = json.loads(raw).get("error", {}) if raw else {}
            if isinstance(error, dict):
                error_msg = error.get("message", error_msg)
                error_code = error.get("code")
        except (ValueError, AttributeError):
            pass

        logger.error(
            "Gateway returned error",
            provider=self.name,
            model=self.model,
            status=status_code,
            code=error_code,
            message=error_msg,
        )
        return ProviderError(
            error_msg,
            provider=self.name,
            model=self.model,
            status_code=status_code,
            error_code=error_code,
        )

    def _transport_error(self, error: httpx.HTTPError) -> ProviderError:
        logger.error("Gateway transport error", provider=self.name, model=self.model, error=str(error))
        return ProviderError(str(error), provider=self.name, model=self.model)

    def _malformed_error(self, error: Exception) -> ProviderError:
        logger.error("Gateway returned malformed body", provider=self.name, model=self.model, error=str(error))
        return ProviderError(f"Malformed gateway response: {error}", provider=self.name, model=self.model)
