from dataclasses import dataclass, field

from PIL import Image

from bill_analyzer.upload.models import DetectedType

_PILLOW_FORMATS: dict[DetectedType, str] = {
    DetectedType.JPEG: "JPEG",
    DetectedType.PNG: "PNG",
}


@dataclass(frozen=True)
class ImageEncoder:
    """A Pillow writer plus the save options used for it."""

    format: str
    options: dict[str, object] = field(default_factory=dict)


def find_encoder(detected_type: DetectedType, jpeg_quality: float = 0.9) -> ImageEncoder | None:
    """Look up a registered Pillow writer for the type.

    Returns None when this Pillow build has no writer for the format.
    """
    pillow_format = _PILLOW_FORMATS.get(detected_type)
    if pillow_format is None:
        return None
    Image.init()
    if pillow_format not in Image.SAVE:
        return None
    # Empty exif keeps the writer from emitting an APP1/eXIf block.
    options: dict[str, object] = {"exif": b""}
    if detected_type is DetectedType.JPEG:
        options["quality"] = round(jpeg_quality * 100)
    return ImageEncoder(format=pillow_format, options=options)
