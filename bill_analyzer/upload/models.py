import io
import os
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO


class DetectedType(Enum):
    """File type derived from the leading magic bytes only."""

    JPEG = "image/jpeg"
    PNG = "image/png"
    PDF = "application/pdf"
    UNRECOGNIZED = "application/octet-stream"

    @property
    def mime_type(self) -> str:
        return self.value

    @property
    def is_image(self) -> bool:
        return self in (DetectedType.JPEG, DetectedType.PNG)


@dataclass(frozen=True)
class RawUpload:
    """An uploaded file as handed over by the HTTP layer.

    ``size`` is the length metadata of ``stream``; ``content_type`` and
    ``filename`` are client-declared and never trusted for detection.
    """

    stream: BinaryIO
    size: int
    content_type: str | None = None
    filename: str | None = None

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        *,
        content_type: str | None = None,
        filename: str | None = None,
    ) -> "RawUpload":
        return cls(
            stream=io.BytesIO(data),
            size=len(data),
            content_type=content_type,
            filename=filename,
        )

    @classmethod
    def from_stream(
        cls,
        stream: BinaryIO,
        *,
        content_type: str | None = None,
        filename: str | None = None,
    ) -> "RawUpload":
        """Wrap a seekable stream, taking its size from the end offset without reading it."""
        stream.seek(0, os.SEEK_END)
        size = stream.tell()
        stream.seek(0)
        return cls(stream=stream, size=size, content_type=content_type, filename=filename)
