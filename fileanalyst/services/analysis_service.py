"""Analysis service: run a prompt against a user's selected data files.

Flow for one request:
- validate the selection and prompt (no I/O before this passes)
- resolve each selected file's text, in the order the user selected them
- build the composite prompt and send one completion request
- normalize usage, substitute a diagnostic for empty reasoning-only output
- detect a downloadable artifact in the text
"""

import logging
import time
import uuid
from collections.abc import Sequence

from fileanalyst.api.exceptions import NoReadableContentError, ValidationError
from fileanalyst.llm import ChatMessage, LLMClient, LLMRequest, Usage, get_client, output_cap
from fileanalyst.models.analysis import (
    AnalysisRequest,
    AnalysisResult,
    UsageStatistics,
)
from fileanalyst.models.user import UserIdentity
from fileanalyst.services.artifact_detection import detect_artifact
from fileanalyst.services.prompts import ANALYST_SYSTEM_PROMPT, build_analysis_prompt
from fileanalyst.services.storage_service import StorageService, storage_service

logger = logging.getLogger(__name__)

EMPTY_OUTPUT_MESSAGE = (
    "The analysis used tokens but did not produce visible output. This can happen "
    "with reasoning models when the whole output budget ({max_output} tokens) is spent "
    "on internal reasoning. Try increasing max tokens or simplifying your prompt."
)


def validate_request(request: AnalysisRequest) -> None:
    """Reject requests that must never reach storage or the provider.

    Raises:
        ValidationError: No files selected or blank prompt.
    """
    if not request.selectedFiles:
        raise ValidationError("Please select at least one data file")
    if not request.prompt or not request.prompt.strip():
        raise ValidationError("Please enter a prompt")


async def resolve_files(
    owner_id: str,
    file_names: Sequence[str],
    storage: StorageService,
) -> list[tuple[str, str]]:
    """Read the selected files, keeping selection order and skipping misses.

    Raises:
        NoReadableContentError: If none of the files could be read.
    """
    resolved: list[tuple[str, str]] = []
    for name in file_names:
        text = await storage.resolve_file_text(owner_id, name)
        if text is None:
            continue
        resolved.append((name, text))

    if not resolved:
        raise NoReadableContentError(list(file_names))
    return resolved


def build_llm_request(
    request: AnalysisRequest,
    files: Sequence[tuple[str, str]],
    default_model: str,
) -> LLMRequest:
    """Assemble the vendor-neutral request for an analysis.

    The provider turns this into the model-specific body (see
    ``fileanalyst.llm.capabilities``).

    Raises:
        NoReadableContentError: If ``files`` is empty.
    """
    if not files:
        raise NoReadableContentError(list(request.selectedFiles))

    return LLMRequest(
        messages=[
            ChatMessage(role="system", content=ANALYST_SYSTEM_PROMPT),
            ChatMessage(role="user", content=build_analysis_prompt(request.prompt, files)),
        ],
        model=request.model or default_model,
        temperature=request.temperature,
        max_tokens=request.maxTokens,
    )


def finalize_text(text: str, usage: Usage, max_output: int) -> tuple[str, bool]:
    """Trim generated text, substituting a diagnostic for empty output.

    Returns:
        (text, substituted) where substituted is True if the diagnostic was used.
    """
    text = (text or "").strip()
    if not text and (usage.reasoning_tokens > 0 or usage.output_tokens > 0):
        return EMPTY_OUTPUT_MESSAGE.format(max_output=max_output), True
    return text, False


def to_statistics(usage: Usage, processing_seconds: float) -> UsageStatistics:
    """Convert normalized usage plus timing into UsageStatistics."""
    return UsageStatistics(
        processingTime=round(processing_seconds, 2),
        inputTokens=usage.input_tokens,
        outputTokens=usage.output_tokens,
        reasoningTokens=usage.reasoning_tokens,
        totalTokens=usage.total_tokens,
    )


async def analyze(
    user: UserIdentity,
    request: AnalysisRequest,
    storage: StorageService | None = None,
    client: LLMClient | None = None,
) -> AnalysisResult:
    """Run an analysis for an authenticated user.

    Args:
        user: The caller.
        request: Files, prompt, and sampling parameters.
        storage: Storage collaborator. Defaults to the shared instance.
        client: LLM client. Defaults to the shared instance.

    Returns:
        The generated text, detected artifact, and usage statistics.

    Raises:
        ValidationError: No files selected or blank prompt.
        NoReadableContentError: None of the selected files could be read.
        LLMError: The provider call failed.
    """
    validate_request(request)

    storage = storage or storage_service
    client = client or get_client()
    correlation_id = str(uuid.uuid4())

    logger.info(
        "Analysis requested",
        extra={
            "correlation_id": correlation_id,
            "user_id": user.id,
            "file_count": len(request.selectedFiles),
            "model": request.model,
        },
    )

    files = await resolve_files(user.id, request.selectedFiles, storage)
    llm_request = build_llm_request(request, files, client.default_model)

    start_time = time.perf_counter()
    response = await client.generate(llm_request, correlation_id=correlation_id)
    processing_seconds = time.perf_counter() - start_time

    max_output = output_cap(llm_request.model, llm_request.max_tokens)
    text, substituted = finalize_text(response.text, response.usage, max_output)
    if substituted:
        logger.warning(
            "Model returned empty content despite using tokens",
            extra={
                "correlation_id": correlation_id,
                "reasoning_tokens": response.usage.reasoning_tokens,
                "output_tokens": response.usage.output_tokens,
            },
        )

    artifact = None if substituted else detect_artifact(text)

    result = AnalysisResult(
        generatedText=text,
        artifact=artifact,
        statistics=to_statistics(response.usage, processing_seconds),
        model=response.model,
    )

    logger.info(
        "Analysis completed",
        extra={
            "correlation_id": correlation_id,
            "processing_time": result.statistics.processingTime,
            "total_tokens": result.statistics.totalTokens,
            "artifact_kind": artifact.kind.value if artifact else None,
        },
    )
    return result
