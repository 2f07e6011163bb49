"""LLM error hierarchy.

Custom exceptions for calls to the hosted model provider.
None of these are retried; the caller decides whether to resubmit.
"""


class LLMError(Exception):
    """Base exception for LLM operations."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        request_id: str | None = None,
        correlation_id: str | None = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.request_id = request_id
        self.correlation_id = correlation_id

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.provider:
            parts.append(f"provider={self.provider}")
        if self.request_id:
            parts.append(f"request_id={self.request_id}")
        return " ".join(parts)


class ProviderNotConfiguredError(LLMError):
    """No API key available for the provider."""

    pass


class ProviderError(LLMError):
    """Non-success HTTP status or transport failure.

    Keeps the provider's status code and raw error body so they can be
    surfaced to the caller untranslated.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str = "",
        provider: str | None = None,
        request_id: str | None = None,
        correlation_id: str | None = None,
    ):
        super().__init__(message, provider, request_id, correlation_id)
        self.status_code = status_code
        self.body = body


class ProviderTimeoutError(ProviderError):
    """Request exceeded the configured wall-clock bound."""

    pass
