import hashlib
from unittest.mock import MagicMock

import pymupdf
import pytest

from pdf_signer.pdf.base import BasePdfDocument, BasePdfEngine
from pdf_signer.pdf.exceptions import (
    DocumentLoadError,
    ImageDecodeError,
    InvalidInputError,
    PageOutOfRangeError,
    SerializationError,
)
from pdf_signer.pdf.pymupdf_adapter import PyMuPdfEngine
from pdf_signer.placement.compositor import PlacementCompositor
from pdf_signer.placement.models import PageGeometry, Placement, PlacementRequest


def _request(
    pdf_bytes: bytes,
    image_bytes: bytes,
    x: float = 10,
    y: float = 10,
    width: float = 20,
    height: float = 5,
    page_index: int = 0,
) -> PlacementRequest:
    return PlacementRequest(
        pdf_bytes=pdf_bytes,
        image_bytes=image_bytes,
        placement=Placement(page_index=page_index, x=x, y=y, width=width, height=height),
    )


def _image_rects(pdf_bytes: bytes, page_index: int) -> list[pymupdf.Rect]:
    with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:
        page = doc[page_index]
        rects: list[pymupdf.Rect] = []
        for image in page.get_images(full=True):
            rects.extend(page.get_image_rects(image[0]))
        return rects


class TestComposeWithPyMuPdf:
    def test_hashes_cover_input_and_output(
        self, sample_pdf_bytes: bytes, square_png_bytes: bytes
    ) -> None:
        compositor = PlacementCompositor(PyMuPdfEngine())
        result = compositor.compose(_request(sample_pdf_bytes, square_png_bytes))

        assert result.original_hash == hashlib.sha256(sample_pdf_bytes).hexdigest()
        assert result.final_hash == hashlib.sha256(result.output_pdf_bytes).hexdigest()
        assert len(result.original_hash) == 64
        assert result.original_hash != result.final_hash

    def test_original_hash_is_deterministic(
        self, sample_pdf_bytes: bytes, square_png_bytes: bytes
    ) -> None:
        compositor = PlacementCompositor(PyMuPdfEngine())
        first = compositor.compose(_request(sample_pdf_bytes, square_png_bytes))
        second = compositor.compose(_request(sample_pdf_bytes, square_png_bytes, x=50))

        assert first.original_hash == second.original_hash
        assert first.final_hash != second.final_hash

    def test_draws_image_at_reference_rect(
        self, sample_pdf_bytes: bytes, square_png_bytes: bytes
    ) -> None:
        compositor = PlacementCompositor(PyMuPdfEngine())
        result = compositor.compose(_request(sample_pdf_bytes, square_png_bytes))

        rects = _image_rects(result.output_pdf_bytes, 0)
        assert len(rects) == 1
        rect = rects[0]
        # PyMuPDF reports top-left coordinates: top = 842 - 715.7 - 42.1.
        assert rect.x0 == pytest.approx(97.95, abs=0.01)
        assert rect.y0 == pytest.approx(84.2, abs=0.01)
        assert rect.width == pytest.approx(42.1, abs=0.01)
        assert rect.height == pytest.approx(42.1, abs=0.01)

    def test_field_hanging_past_right_edge_is_drawn(
        self, sample_pdf_bytes: bytes, square_png_bytes: bytes
    ) -> None:
        compositor = PlacementCompositor(PyMuPdfEngine())
        result = compositor.compose(_request(sample_pdf_bytes, square_png_bytes, x=90))

        assert result.original_hash != result.final_hash
        rects = _image_rects(result.output_pdf_bytes, 0)
        assert len(rects) == 1
        # Box starts at 535.5 and is 119 wide; the 42.1 wide image is centred in it.
        assert rects[0].x0 == pytest.approx(573.95, abs=0.01)

    def test_only_target_page_is_changed(
        self, multi_page_pdf_bytes: bytes, wide_png_bytes: bytes
    ) -> None:
        compositor = PlacementCompositor(PyMuPdfEngine())
        result = compositor.compose(_request(multi_page_pdf_bytes, wide_png_bytes, page_index=1))

        assert _image_rects(result.output_pdf_bytes, 0) == []
        assert len(_image_rects(result.output_pdf_bytes, 1)) == 1
        with pymupdf.open(stream=result.output_pdf_bytes, filetype="pdf") as doc:
            assert doc.page_count == 2
            assert "Page one content" in doc[0].get_text()

    def test_accepts_jpeg(self, sample_pdf_bytes: bytes, jpeg_bytes: bytes) -> None:
        compositor = PlacementCompositor(PyMuPdfEngine())
        result = compositor.compose(_request(sample_pdf_bytes, jpeg_bytes))
        assert len(_image_rects(result.output_pdf_bytes, 0)) == 1

    def test_does_not_mutate_caller_buffer(
        self, sample_pdf_bytes: bytes, square_png_bytes: bytes
    ) -> None:
        buffer = bytearray(sample_pdf_bytes)
        compositor = PlacementCompositor(PyMuPdfEngine())
        compositor.compose(_request(buffer, square_png_bytes))  # type: ignore[arg-type]
        assert bytes(buffer) == sample_pdf_bytes

    def test_zero_height_raises_invalid_input(
        self, sample_pdf_bytes: bytes, square_png_bytes: bytes
    ) -> None:
        compositor = PlacementCompositor(PyMuPdfEngine())
        with pytest.raises(InvalidInputError) as exc_info:
            compositor.compose(_request(sample_pdf_bytes, square_png_bytes, height=0))
        assert exc_info.value.field == "height"

    def test_page_index_past_end_raises(
        self, sample_pdf_bytes: bytes, square_png_bytes: bytes
    ) -> None:
        compositor = PlacementCompositor(PyMuPdfEngine())
        with pytest.raises(PageOutOfRangeError, match="1 page"):
            compositor.compose(_request(sample_pdf_bytes, square_png_bytes, page_index=1))

    def test_invalid_pdf_raises_document_load_error(self, square_png_bytes: bytes) -> None:
        compositor = PlacementCompositor(PyMuPdfEngine())
        with pytest.raises(DocumentLoadError):
            compositor.compose(_request(b"not a pdf", square_png_bytes))

    def test_invalid_image_raises_image_decode_error(self, sample_pdf_bytes: bytes) -> None:
        compositor = PlacementCompositor(PyMuPdfEngine())
        with pytest.raises(ImageDecodeError):
            compositor.compose(_request(sample_pdf_bytes, b"not an image"))

    def test_empty_image_raises_invalid_input(self, sample_pdf_bytes: bytes) -> None:
        compositor = PlacementCompositor(PyMuPdfEngine())
        with pytest.raises(InvalidInputError, match="image_bytes"):
            compositor.compose(_request(sample_pdf_bytes, b""))


class TestComposeMany:
    def test_chains_placements_on_one_document(
        self, sample_pdf_bytes: bytes, square_png_bytes: bytes, wide_png_bytes: bytes
    ) -> None:
        compositor = PlacementCompositor(PyMuPdfEngine())
        result = compositor.compose_many(
            sample_pdf_bytes,
            [
                (Placement(page_index=0, x=10, y=10, width=20, height=5), square_png_bytes),
                (Placement(page_index=0, x=50, y=80, width=30, height=10), wide_png_bytes),
            ],
        )

        assert result.original_hash == hashlib.sha256(sample_pdf_bytes).hexdigest()
        assert len(_image_rects(result.output_pdf_bytes, 0)) == 2

    def test_requires_at_least_one_placement(self, sample_pdf_bytes: bytes) -> None:
        compositor = PlacementCompositor(PyMuPdfEngine())
        with pytest.raises(InvalidInputError, match="At least one"):
            compositor.compose_many(sample_pdf_bytes, [])

    def test_session_exposes_page_count(self, multi_page_pdf_bytes: bytes) -> None:
        compositor = PlacementCompositor(PyMuPdfEngine())
        with compositor.open_session(multi_page_pdf_bytes) as session:
            assert session.page_count == 2
            assert session.original_hash == hashlib.sha256(multi_page_pdf_bytes).hexdigest()


class TestComposeWithMockEngine:
    def _engine(self) -> tuple[MagicMock, MagicMock]:
        document = MagicMock(spec=BasePdfDocument)
        document.page_geometry.return_value = PageGeometry(width_points=595, height_points=842)
        document.to_bytes.return_value = b"%PDF-out"
        engine = MagicMock(spec=BasePdfEngine)
        engine.open.return_value = document
        return engine, document

    def test_draws_on_requested_page(self, square_png_bytes: bytes) -> None:
        engine, document = self._engine()
        compositor = PlacementCompositor(engine)

        result = compositor.compose(_request(b"%PDF-in", square_png_bytes, page_index=0))

        document.draw_image.assert_called_once()
        page_index, rect, png = document.draw_image.call_args.args
        assert page_index == 0
        assert rect.x == pytest.approx(97.95)
        assert rect.y == pytest.approx(715.7)
        assert png == square_png_bytes
        assert result.output_pdf_bytes == b"%PDF-out"

    def test_closes_document_when_serialization_fails(self, square_png_bytes: bytes) -> None:
        engine, document = self._engine()
        document.to_bytes.side_effect = SerializationError("disk full")
        compositor = PlacementCompositor(engine)

        with pytest.raises(SerializationError):
            compositor.compose(_request(b"%PDF-in", square_png_bytes))

        document.close.assert_called()

    def test_invalid_input_never_opens_document(self, square_png_bytes: bytes) -> None:
        engine, _document = self._engine()
        compositor = PlacementCompositor(engine)

        with pytest.raises(InvalidInputError):
            compositor.compose(_request(b"%PDF-in", square_png_bytes, height=0))

        engine.open.assert_not_called()
