import io
from dataclasses import dataclass

from PIL import Image

from pdf_signer.pdf.exceptions import ImageDecodeError

SUPPORTED_FORMATS = frozenset({"PNG", "JPEG", "GIF", "BMP", "WEBP"})
_PNG_SAFE_MODES = frozenset({"1", "L", "LA", "RGB", "RGBA"})


@dataclass(frozen=True)
class DecodedImage:
    """A raster image ready for embedding: natural size plus PNG bytes."""

    width: int
    height: int
    format: str
    png_bytes: bytes


def decode_image(image_bytes: bytes) -> DecodedImage:
    """Decode raster bytes with Pillow and normalize them to PNG.

    PNG input is passed through untouched; other supported formats are
    re-encoded so the PDF engine always receives PNG.

    Raises:
        ImageDecodeError: if the bytes are empty, corrupt or of an unsupported format.
    """
    if not image_bytes:
        raise ImageDecodeError("Image data is empty", "image", b"")
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            img.load()
            image_format = (img.format or "").upper()
            if image_format not in SUPPORTED_FORMATS:
                raise ImageDecodeError(
                    f"Unsupported image format '{image_format or 'unknown'}'. "
                    f"Choose from: {sorted(SUPPORTED_FORMATS)}",
                    "image",
                    image_format,
                )
            width, height = img.size
            png_bytes = image_bytes if image_format == "PNG" else _to_png(img)
    except ImageDecodeError:
        raise
    except Exception as exc:
        raise ImageDecodeError(f"Image could not be decoded: {exc}", "image") from exc

    if width <= 0 or height <= 0:
        raise ImageDecodeError(f"Image has no pixels: {width}x{height}", "image", (width, height))
    return DecodedImage(width=width, height=height, format=image_format, png_bytes=png_bytes)


def _to_png(img: Image.Image) -> bytes:
    if img.mode not in _PNG_SAFE_MODES:
        img = img.convert("RGBA")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
