"""Model provider backends behind the LLMProvider interface."""

from .base import LLMProvider
from .openai import OpenAIProvider

__all__ = [
    "LLMProvider",
    "OpenAIProvider",
]
