"""Storage service for per-user data files.

Files live under ``<UPLOADS_DIR>/<owner_id>/<category>/<epoch_ms>_<filename>``.
The stored name (with its timestamp prefix) is the identifier the frontend
lists, deletes, and selects for analysis.
"""

import logging
import os
import time
import uuid
from datetime import UTC, datetime
from pathlib import Path

import aiofiles

from fileanalyst.api.exceptions import (
    FileTooLargeError,
    InvalidFileTypeError,
    StoredFileExistsError,
    StoredFileNotFoundError,
    ValidationError,
)
from fileanalyst.models.files import (
    ALLOWED_EXTENSIONS,
    ALLOWED_MIME_TYPES,
    LIST_LIMIT,
    MAX_FILE_SIZE,
    RESOLUTION_ORDER,
    FileCategory,
    StoredFile,
)

logger = logging.getLogger(__name__)

# Default uploads directory (can be overridden via environment variable)
UPLOADS_DIR = Path(os.environ.get("UPLOADS_DIR", "uploads"))


def _check_segment(value: str, what: str) -> str:
    """Reject path segments that could escape the owner's folder."""
    if (
        not value
        or value in {".", ".."}
        or "/" in value
        or "\\" in value
        or "\x00" in value
    ):
        raise ValidationError(f"Invalid {what}: {value!r}")
    return value


class StorageService:
    """Service for file operations: upload, list, download, delete, resolve."""

    def __init__(self, uploads_dir: Path | None = None):
        """Initialize the storage service.

        Args:
            uploads_dir: Base directory for file storage. Defaults to 'uploads/'.
        """
        self.uploads_dir = uploads_dir or UPLOADS_DIR

    def storage_path(self, owner_id: str, category: FileCategory, name: str) -> str:
        """Build the namespaced storage path for a file."""
        _check_segment(owner_id, "owner id")
        _check_segment(name, "file name")
        return f"{owner_id}/{category.value}/{name}"

    def _full_path(self, storage_path: str) -> Path:
        return self.uploads_dir / storage_path

    def _to_stored_file(self, owner_id: str, category: FileCategory, file_path: Path) -> StoredFile:
        stat = file_path.stat()
        storage_path = self.storage_path(owner_id, category, file_path.name)
        return StoredFile(
            id=str(uuid.uuid5(uuid.NAMESPACE_URL, storage_path)),
            name=file_path.name,
            category=category,
            createdAt=datetime.fromtimestamp(stat.st_mtime, UTC),
            size=stat.st_size,
        )

    def validate_file(
        self, content_type: str | None, filename: str, file_size: int
    ) -> None:
        """Validate file against size and type constraints.

        Raises:
            FileTooLargeError: If file exceeds MAX_FILE_SIZE.
            InvalidFileTypeError: If file type is not allowed.
        """
        if file_size > MAX_FILE_SIZE:
            raise FileTooLargeError(file_size, MAX_FILE_SIZE)

        ext = Path(filename).suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise InvalidFileTypeError(ext or filename, sorted(ALLOWED_EXTENSIONS))

        if content_type and content_type not in ALLOWED_MIME_TYPES:
            raise InvalidFileTypeError(content_type, list(ALLOWED_MIME_TYPES.keys()))

    async def upload_file(
        self,
        owner_id: str,
        category: FileCategory,
        filename: str,
        content: bytes,
        content_type: str | None = None,
    ) -> StoredFile:
        """Store an uploaded file in the owner's category folder.

        Args:
            owner_id: ID of the authenticated user.
            category: Target folder.
            filename: Original filename (directory parts are dropped).
            content: File content as bytes.
            content_type: MIME type reported by the client.

        Returns:
            Metadata of the stored file.

        Raises:
            FileTooLargeError: If file exceeds size limit.
            InvalidFileTypeError: If file type is not allowed.
            StoredFileExistsError: If the timestamped name is already taken.
        """
        base_name = Path(filename.replace("\\", "/")).name or "unnamed"
        self.validate_file(content_type, base_name, len(content))

        stored_name = f"{int(time.time() * 1000)}_{base_name}"
        storage_path = self.storage_path(owner_id, category, stored_name)
        file_path = self._full_path(storage_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            async with aiofiles.open(file_path, "xb") as f:
                await f.write(content)
        except FileExistsError as e:
            raise StoredFileExistsError(storage_path) from e

        logger.info(
            "Stored file %s (%d bytes)",
            storage_path,
            len(content),
            extra={"owner_id": owner_id, "category": category.value},
        )
        return self._to_stored_file(owner_id, category, file_path)

    async def list_files(
        self, owner_id: str, category: FileCategory | None = None
    ) -> list[StoredFile]:
        """List an owner's files, newest first.

        Args:
            owner_id: ID of the authenticated user.
            category: Folder to list. Lists both folders merged when None.

        Returns:
            Up to LIST_LIMIT files per folder, sorted by createdAt descending.
        """
        categories = [category] if category else list(RESOLUTION_ORDER)
        files: list[StoredFile] = []

        for cat in categories:
            folder = self.uploads_dir / _check_segment(owner_id, "owner id") / cat.value
            if not folder.is_dir():
                continue
            entries = [
                self._to_stored_file(owner_id, cat, path)
                for path in folder.iterdir()
                if path.is_file()
            ]
            entries.sort(key=lambda f: f.createdAt, reverse=True)
            files.extend(entries[:LIST_LIMIT])

        files.sort(key=lambda f: f.createdAt, reverse=True)
        return files

    async def download(self, storage_path: str) -> bytes:
        """Read a file's bytes by storage path.

        Raises:
            StoredFileNotFoundError: If nothing is stored at the path.
        """
        file_path = self._full_path(storage_path)
        if not file_path.is_file():
            raise StoredFileNotFoundError(storage_path)

        async with aiofiles.open(file_path, "rb") as f:
            return await f.read()

    async def delete_file(self, owner_id: str, category: FileCategory, name: str) -> None:
        """Delete one of the owner's files.

        Raises:
            StoredFileNotFoundError: If the file does not exist.
        """
        storage_path = self.storage_path(owner_id, category, name)
        file_path = self._full_path(storage_path)
        if not file_path.is_file():
            raise StoredFileNotFoundError(storage_path)

        file_path.unlink()
        logger.info("Deleted file %s", storage_path, extra={"owner_id": owner_id})

    async def resolve_file_text(self, owner_id: str, name: str) -> str | None:
        """Find a file by name in the owner's folders and return its text.

        Folders are tried in RESOLUTION_ORDER, so farm-data wins when the same
        name exists in both. Bytes are decoded as UTF-8 with replacement.

        Returns:
            The file text, or None if no folder holds the file.
        """
        for category in RESOLUTION_ORDER:
            try:
                storage_path = self.storage_path(owner_id, category, name)
                content = await self.download(storage_path)
            except (StoredFileNotFoundError, ValidationError):
                continue

            text = content.decode("utf-8", errors="replace")
            logger.info("Read file %s (%d chars)", storage_path, len(text))
            return text

        logger.warning(
            "Could not resolve file %s in any folder",
            name,
            extra={"owner_id": owner_id},
        )
        return None


# Singleton instance for use across the application
storage_service = StorageService()
