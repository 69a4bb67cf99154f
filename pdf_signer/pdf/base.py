from abc import ABC, abstractmethod

from pdf_signer.placement.models import DrawRect, PageGeometry


class BasePdfDocument(ABC):
    """An opened, mutable PDF document owned by a single compositing call."""

    @property
    @abstractmethod
    def page_count(self) -> int:
        """Number of pages in the document."""

    @abstractmethod
    def page_geometry(self, page_index: int) -> PageGeometry:
        """Return the size of a page in points.

        Raises:
            PageOutOfRangeError: if page_index is not a page of this document.
        """

    @abstractmethod
    def draw_image(self, page_index: int, rect: DrawRect, png_bytes: bytes) -> None:
        """Draw a PNG image on one page.

        Args:
            page_index: 0-based target page.
            rect: Target rectangle in PDF space (bottom-left origin).
            png_bytes: Encoded PNG image.

        Raises:
            ImageDecodeError: if the engine cannot embed the image.
        """

    @abstractmethod
    def to_bytes(self) -> bytes:
        """Serialize the current document state.

        Raises:
            SerializationError: if the document cannot be written.
        """

    @abstractmethod
    def close(self) -> None:
        """Release engine resources."""

    def __enter__(self) -> "BasePdfDocument":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class BasePdfEngine(ABC):
    """Contract for all PDF engine adapters."""

    @abstractmethod
    def open(self, pdf_bytes: bytes) -> BasePdfDocument:
        """Open a PDF from bytes.

        Raises:
            DocumentLoadError: if the bytes are not a readable PDF.
        """

    @abstractmethod
    def create_sample(self) -> bytes:
        """Build a one-page A4 sample contract used when no PDF is supplied."""
