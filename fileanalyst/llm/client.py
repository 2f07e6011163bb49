"""High-level LLM client.

Wraps the configured provider with correlation-id tracking and request
logging. Failures are surfaced as-is; nothing is retried here.
"""

import logging
import os
import uuid

from .errors import LLMError
from .models import LLMRequest, LLMResponse
from .providers.base import LLMProvider
from .providers.openai import OpenAIProvider

logger = logging.getLogger(__name__)


class LLMClient:
    """High-level LLM client.

    Configuration (env vars):
    - LLM_DEFAULT_MODEL: Baseline model when a request names none
      (default: "gpt-5-2025-08-07")
    - LLM_TIMEOUT_SECONDS: Wall-clock bound on a single call (default: 120)
    """

    DEFAULT_MODEL = "gpt-5-2025-08-07"
    DEFAULT_TIMEOUT = 120.0

    def __init__(
        self,
        default_model: str | None = None,
        timeout: float | None = None,
        openai_api_key: str | None = None,
    ):
        """Initialize LLM client.

        Args:
            default_model: Baseline model. Defaults to LLM_DEFAULT_MODEL env var.
            timeout: Request timeout in seconds. Defaults to LLM_TIMEOUT_SECONDS env var.
            openai_api_key: OpenAI API key. Defaults to OPENAI_API_KEY env var.
        """
        self._default_model = (
            default_model
            or os.environ.get("LLM_DEFAULT_MODEL", self.DEFAULT_MODEL)
        )
        self._timeout = (
            timeout
            if timeout is not None
            else float(os.environ.get("LLM_TIMEOUT_SECONDS", self.DEFAULT_TIMEOUT))
        )
        self._provider: LLMProvider = OpenAIProvider(
            api_key=openai_api_key,
            timeout=self._timeout,
            default_model=self._default_model,
        )

    @property
    def default_model(self) -> str:
        """Model used when a request does not name one."""
        return self._default_model

    @property
    def provider(self) -> LLMProvider:
        """The configured provider."""
        return self._provider

    async def generate(
        self,
        request: LLMRequest,
        correlation_id: str | None = None,
    ) -> LLMResponse:
        """Send one completion request.

        Args:
            request: LLM request to send.
            correlation_id: Optional ID for tracing the request in logs.

        Returns:
            LLM response.

        Raises:
            LLMError: If the provider call fails.
        """
        correlation_id = correlation_id or str(uuid.uuid4())

        try:
            response = await self._provider.generate(request)
        except LLMError as e:
            e.correlation_id = correlation_id
            logger.error(
                "LLM request failed: %s",
                str(e),
                extra={
                    "correlation_id": correlation_id,
                    "provider": self._provider.name,
                    "error_type": type(e).__name__,
                },
            )
            raise

        logger.info(
            "LLM request succeeded",
            extra={
                "correlation_id": correlation_id,
                "provider": response.provider,
                "model": response.model,
                "latency_ms": response.latency_ms,
                "input_tokens": response.usage.input_tokens,
                "output_tokens": response.usage.output_tokens,
                "reasoning_tokens": response.usage.reasoning_tokens,
            },
        )
        return response


# Convenience accessor for module-level use
_default_client: LLMClient | None = None


def get_client() -> LLMClient:
    """Get the default LLM client singleton."""
    global _default_client
    if _default_client is None:
        _default_client = LLMClient()
    return _default_client


def reset_client() -> None:
    """Drop the cached client so configuration is re-read (for testing)."""
    global _default_client
    _default_client = None
