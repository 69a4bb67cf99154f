"""Placement geometry: UI percentages to PDF points, and contain-fit of an image.

UI placements use a top-left origin; PDF pages use a bottom-left origin. Only
the Y axis is flipped. Every function here is pure.
"""

import math

from pdf_signer.pdf.exceptions import InvalidInputError
from pdf_signer.placement.models import DrawRect, PageGeometry, Placement, PlacementBox

EPSILON = 1e-6
_PERCENT_MIN = 0.0
_PERCENT_MAX = 100.0


def validate_placement(placement: Placement) -> None:
    """Check field types and ranges before any geometry is computed.

    Raises:
        InvalidInputError: naming the first offending field.
    """
    _require_page_index(placement.page_index)
    for name in ("x", "y", "width", "height"):
        _require_finite_number(name, getattr(placement, name))

    for name in ("width", "height"):
        value = getattr(placement, name)
        if value <= 0:
            raise InvalidInputError(f"'{name}' must be greater than 0, got {value}", name, value)

    if placement.is_percentage:
        _require_percentages(placement)
    else:
        for name in ("x", "y"):
            value = getattr(placement, name)
            if value < 0:
                raise InvalidInputError(f"'{name}' must not be negative, got {value}", name, value)


def placement_box(placement: Placement, page: PageGeometry) -> PlacementBox:
    """Convert a placement to a box in PDF points on the given page.

    Raises:
        InvalidInputError: if the box is degenerate or leaves the page.
    """
    if placement.is_percentage:
        box_width = placement.width / 100 * page.width_points
        box_height = placement.height / 100 * page.height_points
        box_x = placement.x / 100 * page.width_points
        box_y = page.height_points - (placement.y / 100 * page.height_points) - box_height
    else:
        box_width = float(placement.width)
        box_height = float(placement.height)
        box_x = float(placement.x)
        box_y = float(placement.y)

    if box_width <= 0 or box_height <= 0:
        raise InvalidInputError(
            f"Placement box is degenerate: {box_width:.4f}x{box_height:.4f} points",
            "width" if box_width <= 0 else "height",
            box_width if box_width <= 0 else box_height,
        )

    box = PlacementBox(x=box_x, y=box_y, width=box_width, height=box_height)
    _require_box_on_page(box, page, clip_right=placement.is_percentage)
    return box


def fit_contain(box: PlacementBox, image_width: int, image_height: int) -> DrawRect:
    """Scale an image uniformly to fit inside ``box`` and centre it there."""
    if image_width <= 0 or image_height <= 0:
        raise InvalidInputError(
            f"Image has no pixels: {image_width}x{image_height}",
            "image",
            (image_width, image_height),
        )
    scale = min(box.width / image_width, box.height / image_height)
    draw_width = image_width * scale
    draw_height = image_height * scale
    return DrawRect(
        x=box.x + (box.width - draw_width) / 2,
        y=box.y + (box.height - draw_height) / 2,
        width=draw_width,
        height=draw_height,
        scale=scale,
    )


def _require_page_index(value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"'page_index' must be an integer, got {value!r}", "page_index", value)
    if value < 0:
        raise InvalidInputError(f"'page_index' must not be negative, got {value}", "page_index", value)


def _require_finite_number(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"'{name}' must be a number, got {value!r}", name, value)
    if not math.isfinite(value):
        raise InvalidInputError(f"'{name}' must be finite, got {value}", name, value)


def _require_percentages(placement: Placement) -> None:
    for name in ("x", "y", "width", "height"):
        value = getattr(placement, name)
        if not _PERCENT_MIN <= value <= _PERCENT_MAX:
            raise InvalidInputError(
                f"'{name}' must be a percentage between 0 and 100, got {value}", name, value
            )
    if placement.y + placement.height > _PERCENT_MAX + EPSILON:
        raise InvalidInputError(
            f"Placement extends past the bottom page edge: y + height = {placement.y + placement.height}",
            "height",
            placement.height,
        )


def _require_box_on_page(box: PlacementBox, page: PageGeometry, clip_right: bool = False) -> None:
    # Percentage placements rounding to a hair outside the page are still accepted.
    # Editor fields may hang over the right edge; the page clips what lies past it.
    tolerance = EPSILON * max(page.width_points, page.height_points, 1.0)
    past_right = box.x + box.width > page.width_points + tolerance
    if box.x < -tolerance or (past_right and not clip_right):
        raise InvalidInputError(
            f"Placement box [{box.x:.2f}, {box.x + box.width:.2f}] leaves page width "
            f"{page.width_points:.2f}",
            "x",
            box.x,
        )
    if box.y < -tolerance or box.y + box.height > page.height_points + tolerance:
        raise InvalidInputError(
            f"Placement box [{box.y:.2f}, {box.y + box.height:.2f}] leaves page height "
            f"{page.height_points:.2f}",
            "y",
            box.y,
        )
