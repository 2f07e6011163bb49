"""LLM data models.

Vendor-neutral request and response models for LLM interactions.
The response keeps the raw JSON tree because providers disagree on where
the text and usage counters live.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    """A single message in the conversation."""

    role: Literal["system", "user", "assistant"]
    content: str


class LLMRequest(BaseModel):
    """Vendor-neutral LLM request."""

    messages: list[ChatMessage]
    model: str
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int | None = None


class Usage(BaseModel):
    """Token usage statistics, normalized across model families."""

    input_tokens: int = 0
    output_tokens: int = 0
    reasoning_tokens: int = 0
    total_tokens: int = 0


class LLMResponse(BaseModel):
    """Vendor-neutral LLM response."""

    text: str
    usage: Usage
    model: str
    provider: str
    latency_ms: int
    request_id: str | None = None
    raw: dict[str, Any] | None = None
