"""Reducer-style updates for the editor's field list.

Every function takes a tuple of fields and returns a new tuple; inputs are
never mutated. Unknown ids leave the list unchanged.
"""

import uuid
from collections.abc import Iterable
from dataclasses import replace
from typing import Any

from pdf_signer.fields.models import EditorField, FieldType
from pdf_signer.placement.models import Placement

Fields = tuple[EditorField, ...]

MIN_SIZE_PERCENT = 2.0
_DEFAULT_SIZES: dict[FieldType, tuple[float, float]] = {
    FieldType.CHECKBOX: (5.0, 3.0),
}
_DEFAULT_SIZE = (20.0, 5.0)
_IMMUTABLE_ATTRIBUTES = frozenset({"id"})


def new_field(field_type: FieldType, label: str, x: float, y: float, page: int) -> EditorField:
    """Create a field dropped at (x, y) percent on a 1-based page."""
    width, height = _DEFAULT_SIZES.get(field_type, _DEFAULT_SIZE)
    return EditorField(
        id=uuid.uuid4().hex[:9],
        type=field_type,
        label=label,
        x=x,
        y=y,
        width=width,
        height=height,
        page=page,
    )


def add_field(fields: Iterable[EditorField], field: EditorField) -> Fields:
    return (*fields, field)


def remove_field(fields: Iterable[EditorField], field_id: str) -> Fields:
    return tuple(f for f in fields if f.id != field_id)


def update_field(fields: Iterable[EditorField], field_id: str, **changes: Any) -> Fields:
    """Replace attributes of one field. The id cannot be changed."""
    forbidden = _IMMUTABLE_ATTRIBUTES.intersection(changes)
    if forbidden:
        raise ValueError(f"Cannot update field attribute(s): {sorted(forbidden)}")
    return tuple(replace(f, **changes) if f.id == field_id else f for f in fields)


def set_value(fields: Iterable[EditorField], field_id: str, value: str) -> Fields:
    return update_field(fields, field_id, value=value)


def toggle_checkbox(fields: Iterable[EditorField], field_id: str) -> Fields:
    """Flip a checkbox value between "true" and "false"."""
    fields = tuple(fields)
    field = find_field(fields, field_id)
    if field is None:
        return fields
    return set_value(fields, field_id, "false" if field.value == "true" else "true")


def resize_field(
    fields: Iterable[EditorField],
    field_id: str,
    delta_width: float,
    delta_height: float,
) -> Fields:
    """Grow or shrink a field by percentage deltas, never below MIN_SIZE_PERCENT."""
    fields = tuple(fields)
    field = find_field(fields, field_id)
    if field is None:
        return fields
    return update_field(
        fields,
        field_id,
        width=max(MIN_SIZE_PERCENT, field.width + delta_width),
        height=max(MIN_SIZE_PERCENT, field.height + delta_height),
    )


def find_field(fields: Iterable[EditorField], field_id: str) -> EditorField | None:
    return next((f for f in fields if f.id == field_id), None)


def fields_on_page(fields: Iterable[EditorField], page: int) -> Fields:
    return tuple(f for f in fields if f.page == page)


def first_of_type(fields: Iterable[EditorField], field_type: FieldType) -> EditorField | None:
    return next((f for f in fields if f.type == field_type), None)


def to_placement(field: EditorField) -> Placement:
    """Convert an editor field to a percentage placement on a 0-based page."""
    return Placement(
        page_index=(field.page or 1) - 1,
        x=field.x,
        y=field.y,
        width=field.width,
        height=field.height,
        is_percentage=True,
    )
