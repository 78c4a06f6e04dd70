"""Content-based upload validation and filename sanitization."""

import re

from bill_analyzer.config.settings import Settings
from bill_analyzer.logging.logger import Log
from bill_analyzer.upload.exceptions import FileValidationError, FileValidationErrorCode
from bill_analyzer.upload.models import DetectedType, RawUpload

_JPEG_MAGIC = b"\xff\xd8\xff"
_PNG_MAGIC = b"\x89PNG\r\n\x1a\n"
_PDF_MAGIC = b"%PDF"
_SIGNATURES: tuple[tuple[bytes, DetectedType], ...] = (
    (_JPEG_MAGIC, DetectedType.JPEG),
    (_PNG_MAGIC, DetectedType.PNG),
    (_PDF_MAGIC, DetectedType.PDF),
)
_HEADER_LENGTH = 8
_MIN_SIGNATURE_LENGTH = min(len(magic) for magic, _ in _SIGNATURES)

MAX_FILENAME_LENGTH = 255
DEFAULT_FILENAME = "unnamed_file"
_LEADING_JUNK = re.compile(r"^[\s.]+")


def detect_type(header: bytes) -> DetectedType:
    """Classify a file by its leading bytes only."""
    if len(header) < _MIN_SIGNATURE_LENGTH:
        return DetectedType.UNRECOGNIZED
    for magic, detected in _SIGNATURES:
        if header.startswith(magic):
            return detected
    return DetectedType.UNRECOGNIZED


def sanitize_filename(filename: str | None) -> str:
    """Make a client-supplied filename safe to store and display.

    Never raises. The result has no path separators, no ``..``, no control
    characters, no leading dot and at most 255 characters.
    """
    if filename is None or not filename.strip():
        return DEFAULT_FILENAME

    sanitized = filename.replace("\\", "_").replace("/", "_")
    sanitized = "".join(ch for ch in sanitized if ord(ch) >= 32)
    # Removal can join dots into a fresh "..", e.g. "....".
    while ".." in sanitized:
        sanitized = sanitized.replace("..", "")
    sanitized = _LEADING_JUNK.sub("", sanitized).rstrip()
    sanitized = sanitized[:MAX_FILENAME_LENGTH].rstrip()

    return sanitized or DEFAULT_FILENAME


class FileValidator:
    """Checks presence, size and real (magic-byte) type of an upload."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def validate(self, upload: RawUpload | None) -> DetectedType:
        """Validate an upload and return its detected type.

        Size is checked from length metadata before any content is read.

        Raises:
            FileValidationError: FILE_REQUIRED, FILE_TOO_LARGE,
                UNSUPPORTED_MEDIA_TYPE or FILE_UNREADABLE.
        """
        if upload is None or upload.size <= 0:
            raise FileValidationError(
                FileValidationErrorCode.FILE_REQUIRED,
                "File is required and must not be empty",
            )
        self._require_size_within_limit(upload)
        detected = detect_type(self._read_header(upload))
        if detected is DetectedType.UNRECOGNIZED or not self._settings.is_type_allowed(
            detected.mime_type
        ):
            Log.warning(
                f"Rejected upload: detected={detected.name}, "
                f"declared={upload.content_type!r}, size={upload.size} bytes"
            )
            raise FileValidationError(
                FileValidationErrorCode.UNSUPPORTED_MEDIA_TYPE,
                "File type not supported. Allowed: "
                + ", ".join(self._settings.upload_allowed_types),
            )
        Log.info(f"Upload validated as {detected.name} ({upload.size} bytes)")
        return detected

    def sanitize_filename(self, filename: str | None) -> str:
        return sanitize_filename(filename)

    def read_content(self, upload: RawUpload) -> bytes:
        """Read the full upload body once validation has passed."""
        try:
            upload.stream.seek(0)
            return upload.stream.read()
        except (OSError, ValueError) as exc:
            Log.error(f"Failed to read uploaded file content: {exc}")
            raise FileValidationError(
                FileValidationErrorCode.FILE_UNREADABLE,
                "Failed to read uploaded file content",
            ) from exc

    def _require_size_within_limit(self, upload: RawUpload) -> None:
        if not self._settings.is_file_size_valid(upload.size):
            raise FileValidationError(
                FileValidationErrorCode.FILE_TOO_LARGE,
                "File size exceeds maximum allowed size of "
                f"{self._settings.upload_max_file_size_bytes} bytes",
            )

    @staticmethod
    def _read_header(upload: RawUpload) -> bytes:
        try:
            upload.stream.seek(0)
            header = upload.stream.read(_HEADER_LENGTH)
            upload.stream.seek(0)
        except (OSError, ValueError) as exc:
            Log.error(f"Failed to read file header for type detection: {exc}")
            raise FileValidationError(
                FileValidationErrorCode.FILE_UNREADABLE,
                "Failed to read uploaded file content",
            ) from exc
        return header
