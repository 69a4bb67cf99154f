import pymupdf

from pdf_signer.pdf.base import BasePdfDocument, BasePdfEngine
from pdf_signer.pdf.exceptions import (
    DocumentLoadError,
    ImageDecodeError,
    PageOutOfRangeError,
    SerializationError,
)
from pdf_signer.placement.models import DrawRect, PageGeometry

A4_WIDTH_POINTS = 595.28
A4_HEIGHT_POINTS = 841.89


class PyMuPdfDocument(BasePdfDocument):
    """PyMuPDF-backed document.

    PyMuPDF addresses pages with a top-left origin, so Y is flipped back
    only when drawing.
    """

    def __init__(self, doc: pymupdf.Document) -> None:
        self._doc = doc

    @property
    def page_count(self) -> int:
        return int(self._doc.page_count)

    def page_geometry(self, page_index: int) -> PageGeometry:
        rect = self._page(page_index).rect
        return PageGeometry(width_points=float(rect.width), height_points=float(rect.height))

    def draw_image(self, page_index: int, rect: DrawRect, png_bytes: bytes) -> None:
        page = self._page(page_index)
        top = page.rect.height - rect.y - rect.height
        target = pymupdf.Rect(rect.x, top, rect.x + rect.width, top + rect.height)
        try:
            page.insert_image(target, stream=png_bytes, keep_proportion=False, overlay=True)
        except Exception as exc:
            raise ImageDecodeError(f"pymupdf could not embed image: {exc}", "image") from exc

    def to_bytes(self) -> bytes:
        try:
            return bytes(self._doc.tobytes(deflate=True))
        except Exception as exc:
            raise SerializationError(f"pymupdf serialization failed: {exc}") from exc

    def close(self) -> None:
        if not self._doc.is_closed:
            self._doc.close()

    def _page(self, page_index: int) -> pymupdf.Page:
        if not 0 <= page_index < self._doc.page_count:
            raise PageOutOfRangeError(
                f"Page index {page_index} out of range: document has "
                f"{self._doc.page_count} page(s)",
                "page_index",
                page_index,
            )
        return self._doc[page_index]


class PyMuPdfEngine(BasePdfEngine):
    """Opens and builds PDFs using PyMuPDF."""

    def open(self, pdf_bytes: bytes) -> BasePdfDocument:
        if not pdf_bytes:
            raise DocumentLoadError("PDF data is empty", "pdf")
        try:
            doc = pymupdf.open(stream=bytes(pdf_bytes), filetype="pdf")  # type: ignore[no-untyped-call]
        except Exception as exc:
            raise DocumentLoadError(f"pymupdf could not open PDF: {exc}", "pdf") from exc
        if not doc.is_pdf or doc.needs_pass or doc.page_count == 0:
            doc.close()
            raise DocumentLoadError("Document is not an unencrypted PDF with pages", "pdf")
        return PyMuPdfDocument(doc)

    def create_sample(self) -> bytes:
        with pymupdf.open() as doc:  # type: ignore[no-untyped-call]
            page = doc.new_page(width=A4_WIDTH_POINTS, height=A4_HEIGHT_POINTS)
            # insert_text takes the baseline in top-left coordinates.
            page.insert_text((50, A4_HEIGHT_POINTS - 700), "Sample Contract for Signature", fontsize=20)
            page.insert_text((50, A4_HEIGHT_POINTS - 600), "Please sign below:", fontsize=12)
            return bytes(doc.tobytes())
