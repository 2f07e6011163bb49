"""Model capability table.

Maps model identifiers to the request shape the provider accepts for them.
New model families are added as table entries keyed by identifier prefix.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

from fileanalyst.models.analysis import DEFAULT_MAX_TOKENS


class ModelClass(str, Enum):
    """Request-shape grouping of model identifiers."""

    LEGACY = "legacy"
    REASONING = "reasoning"


TokenField = Literal["max_tokens", "max_completion_tokens"]


@dataclass(frozen=True)
class ModelCapabilities:
    """What an outbound request may carry for a model family."""

    model_class: ModelClass
    supports_temperature: bool
    token_field: TokenField
    minimum_cap: int = 0


LEGACY_CAPABILITIES = ModelCapabilities(
    model_class=ModelClass.LEGACY,
    supports_temperature=True,
    token_field="max_tokens",
)

REASONING_CAPABILITIES = ModelCapabilities(
    model_class=ModelClass.REASONING,
    supports_temperature=False,
    token_field="max_completion_tokens",
    minimum_cap=1000,
)

# Prefix -> capabilities. Longest matching prefix wins.
CAPABILITY_TABLE: dict[str, ModelCapabilities] = {
    "gpt-5": REASONING_CAPABILITIES,
    "gpt-4.1": REASONING_CAPABILITIES,
    "o1": REASONING_CAPABILITIES,
    "o3": REASONING_CAPABILITIES,
    "o4": REASONING_CAPABILITIES,
}


def get_capabilities(model: str) -> ModelCapabilities:
    """Look up the capabilities for a model identifier.

    Unknown identifiers fall back to legacy behaviour (temperature plus
    ``max_tokens``).
    """
    normalized = (model or "").strip().lower()
    matches = [prefix for prefix in CAPABILITY_TABLE if normalized.startswith(prefix)]
    if not matches:
        return LEGACY_CAPABILITIES
    return CAPABILITY_TABLE[max(matches, key=len)]


def classify_model(model: str) -> ModelClass:
    """Return the ModelClass for a model identifier."""
    return get_capabilities(model).model_class


def output_cap(model: str, max_tokens: int | None) -> int:
    """Output-token limit sent for a model.

    Falls back to DEFAULT_MAX_TOKENS when none is requested, then applies
    the model family's floor.
    """
    return max(max_tokens or DEFAULT_MAX_TOKENS, get_capabilities(model).minimum_cap)
