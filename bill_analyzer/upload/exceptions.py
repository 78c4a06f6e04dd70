from enum import Enum


class FileValidationErrorCode(str, Enum):
    FILE_REQUIRED = "FILE_REQUIRED"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    UNSUPPORTED_MEDIA_TYPE = "UNSUPPORTED_MEDIA_TYPE"
    FILE_UNREADABLE = "FILE_UNREADABLE"


class FileValidationError(Exception):
    """Raised when an uploaded file is missing, too large, unreadable or of a rejected type."""

    def __init__(self, code: FileValidationErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
