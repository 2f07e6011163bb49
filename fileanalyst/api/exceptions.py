"""Custom exception classes for the API."""


class ValidationError(Exception):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class UnauthorizedError(Exception):
    """Raised when the caller has no valid identity."""

    def __init__(self, message: str = "Unauthorized"):
        self.message = message
        super().__init__(message)


class NoReadableContentError(Exception):
    """Raised when none of the selected files could be read."""

    def __init__(self, file_names: list[str]):
        self.file_names = file_names
        super().__init__("No file contents could be read from the selected files")


class FileTooLargeError(Exception):
    """Raised when an uploaded file exceeds the maximum size limit."""

    def __init__(self, file_size: int, max_size: int):
        self.file_size = file_size
        self.max_size = max_size
        super().__init__(
            f"File size ({file_size} bytes) exceeds maximum allowed size ({max_size} bytes)"
        )


class InvalidFileTypeError(Exception):
    """Raised when an uploaded file has an unsupported type."""

    def __init__(self, file_type: str, allowed_types: list[str]):
        self.file_type = file_type
        self.allowed_types = allowed_types
        super().__init__(
            f"File type '{file_type}' is not supported. "
            f"Allowed types: {', '.join(allowed_types)}"
        )


class StoredFileNotFoundError(Exception):
    """Raised when a file is not found in storage."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"File '{path}' not found")


class StoredFileExistsError(Exception):
    """Raised when an upload would overwrite a stored file."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"File '{path}' already exists")
