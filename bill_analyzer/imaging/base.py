from abc import ABC, abstractmethod

from bill_analyzer.upload.models import DetectedType


class BaseImageNormalizer(ABC):
    """Contract for all image normalization adapters."""

    @abstractmethod
    def normalize(self, data: bytes, detected_type: DetectedType | None) -> bytes:
        """Bound the image width and drop embedded metadata.

        Args:
            data: Validated upload bytes.
            detected_type: Type detected from the magic bytes.

        Returns:
            Re-encoded image bytes in the source format. PDF input is
            returned unchanged.

        Raises:
            ImagePreprocessingError: on any failure.
        """
