import io
import math

from PIL import Image, UnidentifiedImageError

from bill_analyzer.imaging.base import BaseImageNormalizer
from bill_analyzer.imaging.encoders import find_encoder
from bill_analyzer.imaging.exceptions import ImagePreprocessingError, ImagePreprocessingErrorCode
from bill_analyzer.logging.logger import Log
from bill_analyzer.upload.models import DetectedType

_TARGET_MODES: dict[DetectedType, str] = {
    DetectedType.PNG: "RGBA",
    DetectedType.JPEG: "RGB",
}
_DECODE_ERRORS = (
    UnidentifiedImageError,
    OSError,
    ValueError,
    SyntaxError,
    Image.DecompressionBombError,
)


def target_height(width: int, height: int, max_width: int) -> int:
    """Height that keeps the aspect ratio at ``max_width``, rounded half up."""
    return max(1, math.floor(height * max_width / width + 0.5))


class PillowImageNormalizer(BaseImageNormalizer):
    """Downsizes wide images and strips metadata by a full Pillow re-encode."""

    def __init__(self, max_width: int = 1200, jpeg_quality: float = 0.9) -> None:
        self._max_width = max_width
        self._jpeg_quality = jpeg_quality

    def normalize(self, data: bytes, detected_type: DetectedType | None) -> bytes:
        if not data:
            raise ImagePreprocessingError(
                ImagePreprocessingErrorCode.IMAGE_READ_FAILED,
                "File content must not be empty",
            )
        if detected_type is None:
            raise ImagePreprocessingError(
                ImagePreprocessingErrorCode.IMAGE_READ_FAILED,
                "Detected type must not be null",
            )
        if detected_type is DetectedType.PDF:
            return data
        if not detected_type.is_image:
            raise ImagePreprocessingError(
                ImagePreprocessingErrorCode.PREPROCESSING_FAILED,
                f"Unsupported type for image normalization: {detected_type.mime_type}",
            )

        source = self._decode(data)
        try:
            processed = self._prepare(source, _TARGET_MODES[detected_type])
            try:
                output = self._encode(processed, detected_type)
            finally:
                if processed is not source:
                    processed.close()
        finally:
            source.close()

        Log.info(
            f"Normalized {detected_type.name} image: {len(data)} -> {len(output)} bytes"
        )
        return output

    @staticmethod
    def _decode(data: bytes) -> Image.Image:
        try:
            image = Image.open(io.BytesIO(data))
        except _DECODE_ERRORS as exc:
            Log.warning(f"Image decode failed ({len(data)} bytes): {exc}")
            raise ImagePreprocessingError(
                ImagePreprocessingErrorCode.IMAGE_READ_FAILED,
                "Failed to decode image, content may be corrupted",
            ) from exc
        try:
            image.load()
        except _DECODE_ERRORS as exc:
            image.close()
            Log.warning(f"Image decode failed ({len(data)} bytes): {exc}")
            raise ImagePreprocessingError(
                ImagePreprocessingErrorCode.IMAGE_READ_FAILED,
                "Failed to read image content",
            ) from exc
        return image

    def _prepare(self, source: Image.Image, mode: str) -> Image.Image:
        """Resize to max width or only convert the pixel format.

        Returns ``source`` itself when neither is needed.
        """
        try:
            converted = source if source.mode == mode else source.convert(mode)
            if source.width <= self._max_width:
                prepared = converted
            else:
                height = target_height(source.width, source.height, self._max_width)
                try:
                    prepared = converted.resize(
                        (self._max_width, height), Image.Resampling.BICUBIC
                    )
                finally:
                    if converted is not source:
                        converted.close()
                Log.debug(
                    f"Resized image {source.width}x{source.height} -> "
                    f"{self._max_width}x{height}"
                )
        except (OSError, ValueError) as exc:
            Log.error(f"Image conversion failed: {exc}")
            raise ImagePreprocessingError(
                ImagePreprocessingErrorCode.PREPROCESSING_FAILED,
                "Failed to resize or convert image",
            ) from exc
        prepared.info = {}
        return prepared

    def _encode(self, image: Image.Image, detected_type: DetectedType) -> bytes:
        encoder = find_encoder(detected_type, self._jpeg_quality)
        if encoder is None:
            raise ImagePreprocessingError(
                ImagePreprocessingErrorCode.PREPROCESSING_FAILED,
                f"No {detected_type.name} encoder available in this runtime",
            )
        buffer = io.BytesIO()
        try:
            image.save(buffer, format=encoder.format, **encoder.options)
        except (OSError, ValueError, KeyError) as exc:
            Log.error(f"Image encode failed: {exc}")
            raise ImagePreprocessingError(
                ImagePreprocessingErrorCode.PREPROCESSING_FAILED,
                f"Failed to write preprocessed {detected_type.name} image",
            ) from exc
        return buffer.getvalue()
