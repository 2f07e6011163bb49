"""Pydantic models for stored data files."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel

# File upload constants
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB in bytes

ALLOWED_MIME_TYPES: dict[str, str] = {
    "text/csv": ".csv",
    "application/csv": ".csv",
    "application/vnd.ms-excel": ".xls",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": ".xlsx",
    "application/json": ".json",
    "application/pdf": ".pdf",
    "text/plain": ".txt",
    "application/xml": ".xml",
    "text/xml": ".xml",
    "application/octet-stream": "",
}

ALLOWED_EXTENSIONS: set[str] = {".csv", ".xlsx", ".xls", ".json", ".pdf", ".txt", ".xml"}

# Per-category listing cap
LIST_LIMIT = 100


class FileCategory(str, Enum):
    """Storage folder a file is uploaded into."""

    FARM_DATA = "farm-data"
    CERTIFICATION_REQUIREMENTS = "certification-requirements"


# Resolution order when a file is looked up by name alone
RESOLUTION_ORDER: tuple[FileCategory, ...] = (
    FileCategory.FARM_DATA,
    FileCategory.CERTIFICATION_REQUIREMENTS,
)


class StoredFile(BaseModel):
    """A file in a user's storage folder."""

    id: str
    name: str
    category: FileCategory
    createdAt: datetime
    size: int
