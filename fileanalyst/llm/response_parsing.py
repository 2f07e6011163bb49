"""Defensive parsing of raw chat-completion payloads.

Different model families put the generated text and usage counters in
different places. Everything here works on the plain JSON tree and never
raises: missing or oddly shaped fields degrade to empty text or zero counts.
"""

import logging
from collections.abc import Callable
from typing import Any

from .models import Usage

logger = logging.getLogger(__name__)


def _first_choice(data: dict[str, Any]) -> dict[str, Any]:
    choices = data.get("choices")
    if isinstance(choices, list) and choices and isinstance(choices[0], dict):
        return choices[0]
    return {}


def _join_content(content: Any) -> str:
    """Flatten a content value that is a string or a list of parts."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        pieces = []
        for part in content:
            if isinstance(part, str):
                pieces.append(part)
            elif isinstance(part, dict):
                value = part.get("text") or part.get("content") or ""
                pieces.append(value if isinstance(value, str) else "")
        return "".join(pieces)
    return ""


def _from_message_content(data: dict[str, Any]) -> str:
    message = _first_choice(data).get("message")
    if not isinstance(message, dict):
        return ""
    return _join_content(message.get("content"))


def _from_choice_content(data: dict[str, Any]) -> str:
    return _join_content(_first_choice(data).get("content"))


def _from_output_text(data: dict[str, Any]) -> str:
    value = data.get("output_text")
    return value if isinstance(value, str) else ""


TEXT_EXTRACTORS: tuple[Callable[[dict[str, Any]], str], ...] = (
    _from_message_content,
    _from_choice_content,
    _from_output_text,
)


def extract_text(data: Any) -> str:
    """Return the first non-empty text found in a provider response.

    Args:
        data: Decoded JSON response body.

    Returns:
        Generated text, or an empty string when none is present.
    """
    if not isinstance(data, dict):
        return ""

    for extractor in TEXT_EXTRACTORS:
        try:
            text = extractor(data)
        except (AttributeError, KeyError, TypeError, IndexError) as e:
            logger.warning("Text extractor %s failed: %s", extractor.__name__, e)
            continue
        if text:
            return text

    return ""


def _count(value: Any) -> int | None:
    """Coerce a usage counter; non-numeric values count as absent."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)) and value >= 0:
        return int(value)
    return None


def _pick(mapping: dict[str, Any], *keys: str) -> int | None:
    for key in keys:
        value = _count(mapping.get(key))
        if value is not None:
            return value
    return None


def normalize_usage(raw_usage: Any) -> Usage:
    """Normalize a provider usage object to Usage.

    Prefers ``input_tokens``/``output_tokens`` and falls back to
    ``prompt_tokens``/``completion_tokens``. Reasoning tokens come from a
    top-level ``reasoning_tokens`` field or from
    ``completion_tokens_details.reasoning_tokens``. The total is the
    provider-reported value, else input + output.
    """
    usage = raw_usage if isinstance(raw_usage, dict) else {}

    input_tokens = _pick(usage, "input_tokens", "prompt_tokens") or 0
    output_tokens = _pick(usage, "output_tokens", "completion_tokens") or 0

    reasoning_tokens = _pick(usage, "reasoning_tokens")
    if reasoning_tokens is None:
        details = usage.get("completion_tokens_details")
        if isinstance(details, dict):
            reasoning_tokens = _pick(details, "reasoning_tokens")

    total_tokens = _pick(usage, "total_tokens")
    if total_tokens is None:
        total_tokens = input_tokens + output_tokens

    return Usage(
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        reasoning_tokens=reasoning_tokens or 0,
        total_tokens=total_tokens,
    )
