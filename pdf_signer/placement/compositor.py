from pdf_signer.image.decoder import decode_image
from pdf_signer.logging.logger import Log
from pdf_signer.pdf.base import BasePdfDocument, BasePdfEngine
from pdf_signer.pdf.exceptions import InvalidInputError
from pdf_signer.placement.geometry import fit_contain, placement_box, validate_placement
from pdf_signer.placement.hashing import sha256_hex
from pdf_signer.placement.models import CompositedResult, DrawRect, Placement, PlacementRequest


class CompositingSession:
    """Applies several placements to one opened document, then serializes once.

    The original hash covers the bytes the session was opened with; the final
    hash covers the bytes produced by ``finish``.
    """

    def __init__(self, engine: BasePdfEngine, pdf_bytes: bytes) -> None:
        pdf_bytes = bytes(pdf_bytes)
        self._original_hash = sha256_hex(pdf_bytes)
        self._document: BasePdfDocument = engine.open(pdf_bytes)

    @property
    def original_hash(self) -> str:
        return self._original_hash

    @property
    def page_count(self) -> int:
        return self._document.page_count

    def apply(self, placement: Placement, image_bytes: bytes) -> DrawRect:
        """Burn one image into the document and return where it was drawn."""
        validate_placement(placement)
        page = self._document.page_geometry(placement.page_index)
        image = decode_image(image_bytes)
        box = placement_box(placement, page)
        rect = fit_contain(box, image.width, image.height)
        Log.debug(
            f"Page {placement.page_index} {page.width_points}x{page.height_points}pt: "
            f"box=({box.x:.2f}, {box.y:.2f}, {box.width:.2f}, {box.height:.2f}) "
            f"draw=({rect.x:.2f}, {rect.y:.2f}, {rect.width:.2f}, {rect.height:.2f})"
        )
        self._document.draw_image(placement.page_index, rect, image.png_bytes)
        return rect

    def finish(self) -> CompositedResult:
        """Serialize the document and close the session."""
        try:
            output = self._document.to_bytes()
        finally:
            self.close()
        return CompositedResult(
            output_pdf_bytes=output,
            original_hash=self._original_hash,
            final_hash=sha256_hex(output),
        )

    def close(self) -> None:
        self._document.close()

    def __enter__(self) -> "CompositingSession":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class PlacementCompositor:
    """Burns a raster image into a PDF page at a UI placement."""

    def __init__(self, engine: BasePdfEngine) -> None:
        self._engine = engine

    def compose(self, request: PlacementRequest) -> CompositedResult:
        """Composite ``request.image_bytes`` onto the requested page.

        Raises:
            InvalidInputError: on missing or out-of-range fields, or a degenerate box.
            PageOutOfRangeError: if the page index is not in the document.
            ImageDecodeError: if the image cannot be decoded.
            DocumentLoadError: if the PDF cannot be parsed.
            SerializationError: if the output cannot be written.
        """
        _require_bytes("pdf_bytes", request.pdf_bytes)
        _require_bytes("image_bytes", request.image_bytes)
        validate_placement(request.placement)

        with self.open_session(request.pdf_bytes) as session:
            session.apply(request.placement, request.image_bytes)
            result = session.finish()

        Log.info(
            f"Composited image on page {request.placement.page_index}: "
            f"{result.original_hash[:12]} -> {result.final_hash[:12]}"
        )
        return result

    def compose_many(
        self,
        pdf_bytes: bytes,
        items: list[tuple[Placement, bytes]],
    ) -> CompositedResult:
        """Apply several placements to one document in order."""
        _require_bytes("pdf_bytes", pdf_bytes)
        if not items:
            raise InvalidInputError("At least one placement is required", "placements", items)
        with self.open_session(pdf_bytes) as session:
            for placement, image_bytes in items:
                _require_bytes("image_bytes", image_bytes)
                session.apply(placement, image_bytes)
            result = session.finish()
        Log.info(f"Composited {len(items)} placement(s): {result.final_hash[:12]}")
        return result

    def open_session(self, pdf_bytes: bytes) -> CompositingSession:
        return CompositingSession(self._engine, pdf_bytes)


def _require_bytes(name: str, value: object) -> None:
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise InvalidInputError(f"'{name}' must be bytes, got {type(value).__name__}", name, value)
    if len(value) == 0:
        raise InvalidInputError(f"'{name}' is empty", name, value)
