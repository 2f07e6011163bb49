"""Abstract base class for LLM providers.

Defines the interface that all LLM providers must implement.
"""

from abc import ABC, abstractmethod
from typing import Any

from ..models import LLMRequest, LLMResponse


class LLMProvider(ABC):
    """Base interface for LLM providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider identifier, e.g. 'openai'."""
        ...

    @abstractmethod
    def build_request(self, request: LLMRequest) -> dict[str, Any]:
        """Convert a vendor-neutral request to the provider's request body.

        Args:
            request: Vendor-neutral LLM request.

        Returns:
            JSON-able request body.
        """
        ...

    @abstractmethod
    async def generate(self, request: LLMRequest) -> LLMResponse:
        """Send a completion request and return the response.

        Args:
            request: Vendor-neutral LLM request.

        Returns:
            Vendor-neutral LLM response.

        Raises:
            ProviderNotConfiguredError: No API key configured.
            ProviderTimeoutError: Request exceeded the timeout.
            ProviderError: Non-success status or transport failure.
        """
        ...
