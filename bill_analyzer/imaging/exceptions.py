from enum import Enum


class ImagePreprocessingErrorCode(str, Enum):
    IMAGE_READ_FAILED = "IMAGE_READ_FAILED"
    PREPROCESSING_FAILED = "PREPROCESSING_FAILED"


class ImagePreprocessingError(Exception):
    """Raised when an image cannot be decoded, converted or re-encoded."""

    def __init__(self, code: ImagePreprocessingErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
