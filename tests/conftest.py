import io

import pytest
from PIL import Image
from PIL.PngImagePlugin import PngInfo
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from bill_analyzer.config.settings import Settings

EXIF_MAKE_TAG = 0x010F


def make_jpeg(width: int, height: int, *, with_exif: bool = False) -> bytes:
    buf = io.BytesIO()
    image = Image.new("RGB", (width, height), (200, 120, 40))
    if with_exif:
        exif = Image.Exif()
        exif[EXIF_MAKE_TAG] = "TestCamera"
        image.save(buf, format="JPEG", quality=95, exif=exif.tobytes())
    else:
        image.save(buf, format="JPEG", quality=95)
    return buf.getvalue()


def make_png(width: int, height: int, *, mode: str = "RGBA", comment: str | None = None) -> bytes:
    buf = io.BytesIO()
    color = (10, 20, 30, 0) if mode == "RGBA" else (10, 20, 30)
    image = Image.new(mode, (width, height), color)
    if comment is not None:
        info = PngInfo()
        info.add_text("Comment", comment)
        image.save(buf, format="PNG", pnginfo=info)
    else:
        image.save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture()
def settings() -> Settings:
    """Settings isolated from any local .env file, using the offline provider."""
    return Settings(_env_file=None, analysis_provider="example")


@pytest.fixture()
def large_jpeg_bytes() -> bytes:
    """2000x1000 JPEG carrying an EXIF block."""
    return make_jpeg(2000, 1000, with_exif=True)


@pytest.fixture()
def small_jpeg_bytes() -> bytes:
    return make_jpeg(640, 480)


@pytest.fixture()
def large_png_bytes() -> bytes:
    """2400x1200 fully transparent PNG."""
    return make_png(2400, 1200)


@pytest.fixture()
def small_png_bytes() -> bytes:
    return make_png(300, 200, comment="scanned by test")


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Receipt 0001")
    c.save()
    return buf.getvalue()
