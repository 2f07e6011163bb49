"""OpenAI provider implementation.

Implements the LLMProvider interface for OpenAI's Chat Completions API.
The request body shape follows the model capability table: reasoning
models get ``max_completion_tokens`` and no temperature.
"""

import logging
import os
import time
from typing import Any

from openai import AsyncOpenAI, APIConnectionError, APIStatusError, APITimeoutError

from ..capabilities import get_capabilities, output_cap
from ..errors import ProviderError, ProviderNotConfiguredError, ProviderTimeoutError
from ..models import LLMRequest, LLMResponse
from ..response_parsing import extract_text, normalize_usage
from .base import LLMProvider

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """OpenAI Chat Completions API provider."""

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float = 120.0,
        default_model: str = "gpt-5-2025-08-07",
    ):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key. Defaults to OPENAI_API_KEY env var.
            timeout: Request timeout in seconds.
            default_model: Model used when the request leaves it empty.
        """
        self._api_key = api_key or os.environ.get("OPENAI_API_KEY")
        self._timeout = timeout
        self._default_model = default_model
        self._client: AsyncOpenAI | None = None

    @property
    def name(self) -> str:
        """Provider identifier."""
        return "openai"

    @property
    def client(self) -> AsyncOpenAI:
        """Lazy-initialized OpenAI client (SDK retries disabled)."""
        if self._client is None:
            if not self._api_key:
                raise ProviderNotConfiguredError(
                    "OpenAI API key not configured. Set OPENAI_API_KEY environment variable.",
                    provider=self.name,
                )
            self._client = AsyncOpenAI(
                api_key=self._api_key,
                timeout=self._timeout,
                max_retries=0,
            )
        return self._client

    def build_request(self, request: LLMRequest) -> dict[str, Any]:
        """Convert LLMRequest to an OpenAI chat-completions body."""
        model = request.model or self._default_model
        capabilities = get_capabilities(model)

        openai_request: dict[str, Any] = {
            "model": model,
            "messages": [
                {"role": msg.role, "content": msg.content} for msg in request.messages
            ],
        }

        if capabilities.supports_temperature:
            openai_request["temperature"] = request.temperature

        openai_request[capabilities.token_field] = output_cap(model, request.max_tokens)

        return openai_request

    async def generate(self, request: LLMRequest) -> LLMResponse:
        """Send a completion request to OpenAI.

        Raises:
            ProviderNotConfiguredError: No API key.
            ProviderTimeoutError: The call exceeded the timeout.
            ProviderError: Non-success status or connection failure.
        """
        openai_request = self.build_request(request)
        client = self.client

        logger.info(
            "Calling OpenAI",
            extra={
                "model": openai_request["model"],
                "prompt_chars": sum(len(m["content"]) for m in openai_request["messages"]),
            },
        )

        start_time = time.perf_counter()
        try:
            response = await client.chat.completions.create(**openai_request)
        except APITimeoutError as e:
            raise ProviderTimeoutError(
                f"OpenAI request timed out after {self._timeout}s",
                provider=self.name,
            ) from e
        except APIConnectionError as e:
            raise ProviderError(
                f"Failed to connect to OpenAI: {e}",
                provider=self.name,
            ) from e
        except APIStatusError as e:
            self._handle_api_error(e)

        latency_ms = int((time.perf_counter() - start_time) * 1000)
        return self._parse_response(response, latency_ms, openai_request["model"])

    def _parse_response(self, response: Any, latency_ms: int, requested_model: str) -> LLMResponse:
        """Convert an SDK response to LLMResponse via its plain JSON tree."""
        raw = response.model_dump() if hasattr(response, "model_dump") else response
        if not isinstance(raw, dict):
            raw = {}

        model = raw.get("model")
        return LLMResponse(
            text=extract_text(raw),
            usage=normalize_usage(raw.get("usage")),
            model=model if isinstance(model, str) and model else requested_model,
            provider=self.name,
            latency_ms=latency_ms,
            request_id=raw.get("id") if isinstance(raw.get("id"), str) else None,
            raw=raw,
        )

    def _handle_api_error(self, error: APIStatusError) -> None:
        """Convert an OpenAI status error to ProviderError, keeping status and body."""
        status_code = error.status_code
        request_id = getattr(error, "request_id", None)

        body = ""
        response = getattr(error, "response", None)
        if response is not None:
            try:
                body = response.text
            except (AttributeError, UnicodeDecodeError):
                body = ""
        if not isinstance(body, str) or not body:
            body = str(getattr(error, "message", None) or error)

        logger.error("OpenAI API error: %s - %s", status_code, body)

        raise ProviderError(
            f"OpenAI API error: {status_code} - {body}",
            status_code=status_code,
            body=body,
            provider=self.name,
            request_id=request_id,
        ) from error
