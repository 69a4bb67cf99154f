from dataclasses import dataclass
from enum import Enum


class FieldType(str, Enum):
    """Kinds of fields the editor palette can drop on a page."""

    SIGNATURE = "SIGNATURE"
    TEXT = "TEXT"
    IMAGE = "IMAGE"
    DATE = "DATE"
    CHECKBOX = "CHECKBOX"


@dataclass(frozen=True)
class EditorField:
    """A field placed on a rendered page.

    Position and size are percentages of the rendered page, top-left origin.
    ``page`` is 1-based, as shown in the editor.
    """

    id: str
    type: FieldType
    label: str
    x: float
    y: float
    width: float
    height: float
    page: int
    value: str = ""
