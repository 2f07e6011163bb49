"""Request and result models for data analysis.

Field names are camelCase to match the JSON the frontend sends and renders.
Results are frozen: they are built once per request and never mutated.
"""

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 2000


class AnalysisRequest(BaseModel):
    """Request body for POST /api/analyze.

    Non-empty file selection and a non-blank prompt are checked by the
    analysis service so they surface as VALIDATION_ERROR rather than 422.
    """

    selectedFiles: list[str] = []
    prompt: str = ""
    temperature: Annotated[float, Field(ge=0.0, le=2.0)] = DEFAULT_TEMPERATURE
    maxTokens: Annotated[int, Field(ge=1, le=4000)] = DEFAULT_MAX_TOKENS
    model: str | None = None


class ArtifactKind(str, Enum):
    """Kind of downloadable artifact embedded in a response."""

    CSV = "csv"
    JSON = "json"
    XML = "xml"
    TXT = "txt"
    SQL = "sql"
    PYTHON = "python"
    JAVASCRIPT = "javascript"


class DetectedArtifact(BaseModel):
    """A downloadable artifact found in generated text."""

    model_config = ConfigDict(frozen=True)

    present: bool = True
    content: str
    suggestedFilename: str
    fileExtension: str
    mimeType: str
    kind: ArtifactKind


class UsageStatistics(BaseModel):
    """Timing and token usage for one analysis."""

    model_config = ConfigDict(frozen=True)

    processingTime: Annotated[float, Field(ge=0.0, description="Seconds, 2 decimals")]
    inputTokens: Annotated[int, Field(ge=0)] = 0
    outputTokens: Annotated[int, Field(ge=0)] = 0
    reasoningTokens: Annotated[int, Field(ge=0)] = 0
    totalTokens: Annotated[int, Field(ge=0)] = 0


class AnalysisResult(BaseModel):
    """Result of one analysis request."""

    model_config = ConfigDict(frozen=True)

    generatedText: str
    artifact: DetectedArtifact | None = None
    statistics: UsageStatistics
    model: str
