"""Request, result, and storage models.

Field names are camelCase; these classes are the schemas the frontend sees in OpenAPI.
"""

from .analysis import (
    AnalysisRequest,
    AnalysisResult,
    ArtifactKind,
    DetectedArtifact,
    UsageStatistics,
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
)
from .files import (
    FileCategory,
    StoredFile,
    ALLOWED_EXTENSIONS,
    ALLOWED_MIME_TYPES,
    LIST_LIMIT,
    MAX_FILE_SIZE,
    RESOLUTION_ORDER,
)
from .user import UserIdentity

__all__ = [
    "AnalysisRequest",
    "AnalysisResult",
    "ArtifactKind",
    "DetectedArtifact",
    "UsageStatistics",
    "DEFAULT_MAX_TOKENS",
    "DEFAULT_TEMPERATURE",
    "FileCategory",
    "StoredFile",
    "ALLOWED_EXTENSIONS",
    "ALLOWED_MIME_TYPES",
    "LIST_LIMIT",
    "MAX_FILE_SIZE",
    "RESOLUTION_ORDER",
    "UserIdentity",
]
