"""LLM provider abstraction layer.

This module provides a vendor-neutral interface for calling the hosted model
provider, with a capability table that decides the request shape per model.
"""

from .capabilities import (
    ModelCapabilities,
    ModelClass,
    classify_model,
    get_capabilities,
    output_cap,
)
from .client import LLMClient, get_client
from .errors import (
    LLMError,
    ProviderError,
    ProviderNotConfiguredError,
    ProviderTimeoutError,
)
from .models import ChatMessage, LLMRequest, LLMResponse, Usage
from .response_parsing import extract_text, normalize_usage

__all__ = [
    "LLMClient",
    "get_client",
    "LLMRequest",
    "LLMResponse",
    "ChatMessage",
    "Usage",
    "ModelClass",
    "ModelCapabilities",
    "classify_model",
    "get_capabilities",
    "output_cap",
    "extract_text",
    "normalize_usage",
    "LLMError",
    "ProviderError",
    "ProviderNotConfiguredError",
    "ProviderTimeoutError",
]
