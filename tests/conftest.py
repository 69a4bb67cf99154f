import io
from collections.abc import Callable

import pytest
from PIL import Image
from reportlab.pdfgen import canvas

A4_PORTRAIT = (595, 842)


def _pdf_bytes(pages: list[str], pagesize: tuple[float, float] = A4_PORTRAIT) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=pagesize)
    for text in pages:
        c.drawString(72, 720, text)
        c.showPage()
    c.save()
    return buf.getvalue()


def _image_bytes(size: tuple[int, int], fmt: str = "PNG", color: str = "red") -> bytes:
    buf = io.BytesIO()
    mode = "RGBA" if fmt == "PNG" else "RGB"
    Image.new(mode, size, color).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a single 595x842pt page with known text."""
    return _pdf_bytes(["Contract for signature"])


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page 595x842pt PDF."""
    return _pdf_bytes(["Page one content", "Page two content"])


@pytest.fixture()
def make_pdf() -> Callable[..., bytes]:
    return _pdf_bytes


@pytest.fixture()
def square_png_bytes() -> bytes:
    """A 5x5 PNG, the size of the reference signature placeholder."""
    return _image_bytes((5, 5))


@pytest.fixture()
def wide_png_bytes() -> bytes:
    return _image_bytes((200, 50))


@pytest.fixture()
def jpeg_bytes() -> bytes:
    return _image_bytes((40, 20), fmt="JPEG", color="blue")


@pytest.fixture()
def make_image() -> Callable[..., bytes]:
    return _image_bytes
