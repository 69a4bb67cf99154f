from dataclasses import dataclass


@dataclass(frozen=True)
class Placement:
    """Where to burn an image on a page.

    Percentages are relative to the rendered page with a top-left origin.
    With ``is_percentage=False`` the values are absolute PDF points with a
    bottom-left origin and are used as the box unchanged.
    """

    page_index: int
    x: float
    y: float
    width: float
    height: float
    is_percentage: bool = True


@dataclass(frozen=True)
class PlacementRequest:
    """Everything one burn-in needs: the document, the image and the placement."""

    pdf_bytes: bytes
    image_bytes: bytes
    placement: Placement


@dataclass(frozen=True)
class PageGeometry:
    """Page size in points (PDF space, bottom-left origin)."""

    width_points: float
    height_points: float


@dataclass(frozen=True)
class PlacementBox:
    """Placement rectangle in PDF points, bottom-left origin."""

    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class DrawRect:
    """Rectangle the scaled image is drawn into, PDF points, bottom-left origin."""

    x: float
    y: float
    width: float
    height: float
    scale: float


@dataclass(frozen=True)
class CompositedResult:
    """Output document plus the before/after audit hashes."""

    output_pdf_bytes: bytes
    original_hash: str
    final_hash: str
