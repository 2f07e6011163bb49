"""Detection of downloadable artifacts in generated text.

Rules are evaluated in a fixed order and the first match wins:

1. Raw CSV: every line of the trimmed text contains a comma, over at least
   two lines.
2. Fenced code block, by language tag: csv, json, xml, txt/text, sql,
   python, javascript/js. Only the inner content is kept.
3. Bare JSON: the trimmed text is a ``{...}`` or ``[...]`` body that parses.

This is a syntactic check. A correctly tagged fence is extracted as-is even
when its content is malformed; only the bare-JSON rule validates.
Note the raw CSV rule also accepts prose where every line has a comma.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from dataclasses import dataclass

from fileanalyst.models.analysis import ArtifactKind, DetectedArtifact

ARTIFACT_BASENAME = "analysis_result"

CSV_LIKE_PATTERN = re.compile(r"^[^,\n]*,[^\n]*(?:\n[^,\n]*,[^\n]*)*$")


@dataclass(frozen=True)
class FenceRule:
    """A fenced-block language tag and the artifact it produces."""

    kind: ArtifactKind
    tags: tuple[str, ...]
    extension: str
    mime_type: str

    @property
    def pattern(self) -> re.Pattern[str]:
        tags = "|".join(re.escape(tag) for tag in self.tags)
        # Tag must end the word; anything after it on the fence line is ignored
        return re.compile(
            rf"```(?:{tags})(?![\w.+-])[^\n]*\n(.*?)```",
            re.IGNORECASE | re.DOTALL,
        )


FENCE_RULES: tuple[FenceRule, ...] = (
    FenceRule(ArtifactKind.CSV, ("csv",), "csv", "text/csv"),
    FenceRule(ArtifactKind.JSON, ("json",), "json", "application/json"),
    FenceRule(ArtifactKind.XML, ("xml",), "xml", "application/xml"),
    FenceRule(ArtifactKind.TXT, ("txt", "text"), "txt", "text/plain"),
    FenceRule(ArtifactKind.SQL, ("sql",), "sql", "text/plain"),
    FenceRule(ArtifactKind.PYTHON, ("python",), "py", "text/plain"),
    FenceRule(ArtifactKind.JAVASCRIPT, ("javascript", "js"), "js", "text/plain"),
)

_FENCE_PATTERNS = tuple((rule, rule.pattern) for rule in FENCE_RULES)


def _artifact(kind: ArtifactKind, content: str, extension: str, mime_type: str) -> DetectedArtifact:
    return DetectedArtifact(
        content=content,
        suggestedFilename=f"{ARTIFACT_BASENAME}.{extension}",
        fileExtension=extension,
        mimeType=mime_type,
        kind=kind,
    )


def detect_raw_csv(text: str) -> DetectedArtifact | None:
    """Match unfenced CSV output."""
    if "," not in text or len(text.split("\n")) < 2:
        return None
    if not CSV_LIKE_PATTERN.match(text):
        return None
    return _artifact(ArtifactKind.CSV, text, "csv", "text/csv")


def detect_fenced_block(text: str) -> DetectedArtifact | None:
    """Match the first fenced block by tag precedence, not by position."""
    for rule, pattern in _FENCE_PATTERNS:
        match = pattern.search(text)
        if match:
            return _artifact(rule.kind, match.group(1).strip(), rule.extension, rule.mime_type)
    return None


def detect_bare_json(text: str) -> DetectedArtifact | None:
    """Match an unfenced JSON object or array that parses.

    Text nested too deeply to decode counts as not parsing.
    """
    looks_like_json = (text.startswith("{") and text.endswith("}")) or (
        text.startswith("[") and text.endswith("]")
    )
    if not looks_like_json:
        return None
    try:
        json.loads(text)
    except (ValueError, RecursionError):
        return None
    return _artifact(ArtifactKind.JSON, text, "json", "application/json")


DETECTORS: tuple[Callable[[str], DetectedArtifact | None], ...] = (
    detect_raw_csv,
    detect_fenced_block,
    detect_bare_json,
)


def detect_artifact(generated_text: str) -> DetectedArtifact | None:
    """Return the artifact embedded in generated text, if any.

    Args:
        generated_text: Text returned by the model.

    Returns:
        The first artifact matched by DETECTORS, or None.
    """
    text = (generated_text or "").strip()
    if not text:
        return None

    for detector in DETECTORS:
        artifact = detector(text)
        if artifact is not None:
            return artifact
    return None
