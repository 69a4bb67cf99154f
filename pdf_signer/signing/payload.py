"""Parses the JSON body of a sign request into typed values."""

import base64
import binascii
import math
from dataclasses import dataclass, field
from typing import Any

from pdf_signer.fields.models import EditorField, FieldType
from pdf_signer.fields.reducers import to_placement
from pdf_signer.placement.models import Placement
from pdf_signer.signing.exceptions import PayloadError

DEFAULT_PDF_ID = "sample-pdf"
_PLACEMENT_FIELDS = ("x", "y", "width", "height")


@dataclass(frozen=True)
class SignPayload:
    """A validated sign request.

    ``placements`` holds one entry for the flat x/y/width/height form, or one
    per SIGNATURE field when the body carries an editor ``fields`` list.
    """

    signature_image: bytes
    placements: tuple[Placement, ...]
    pdf_bytes: bytes | None = None
    pdf_id: str = DEFAULT_PDF_ID
    fields: tuple[EditorField, ...] = field(default_factory=tuple)


def parse_sign_payload(data: Any) -> SignPayload:
    """Validate a sign request body and build a SignPayload.

    Raises:
        PayloadError: on any missing or malformed field.
    """
    if not isinstance(data, dict):
        raise PayloadError("Request body must be a JSON object")

    signature_raw = data.get("signatureImage")
    if not signature_raw:
        raise PayloadError("Missing required fields: signatureImage", "signatureImage")
    signature_image = decode_data_uri(signature_raw, "signatureImage")

    pdf_raw = data.get("pdfBase64")
    pdf_bytes = decode_data_uri(pdf_raw, "pdfBase64") if pdf_raw else None

    editor_fields: tuple[EditorField, ...] = ()
    if data.get("fields") is not None:
        editor_fields = _build_fields(data["fields"])
        placements = _signature_placements(editor_fields)
    else:
        placements = (_build_placement(data),)

    pdf_id = data.get("pdfId") or DEFAULT_PDF_ID
    if not isinstance(pdf_id, str):
        raise PayloadError("'pdfId' must be a string", "pdfId")

    return SignPayload(
        signature_image=signature_image,
        placements=placements,
        pdf_bytes=pdf_bytes,
        pdf_id=pdf_id,
        fields=editor_fields,
    )


def decode_data_uri(value: Any, field_name: str) -> bytes:
    """Decode ``data:<mime>;base64,<data>`` or bare base64 into bytes."""
    if not isinstance(value, str):
        raise PayloadError(f"'{field_name}' must be a base64 string", field_name)
    encoded = value.split(",", 1)[1] if value.startswith("data:") and "," in value else value
    try:
        decoded = base64.b64decode("".join(encoded.split()), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise PayloadError(f"'{field_name}' is not valid base64: {exc}", field_name) from exc
    if not decoded:
        raise PayloadError(f"'{field_name}' is empty", field_name)
    return decoded


def _build_placement(data: dict[str, Any]) -> Placement:
    missing = [name for name in _PLACEMENT_FIELDS if data.get(name) is None]
    if missing:
        raise PayloadError(f"Missing required fields: {', '.join(missing)}", missing[0])
    return Placement(
        page_index=_to_int(data.get("pageIndex", 0) or 0, "pageIndex"),
        x=_to_float(data["x"], "x"),
        y=_to_float(data["y"], "y"),
        width=_to_float(data["width"], "width"),
        height=_to_float(data["height"], "height"),
        is_percentage=_to_bool(data.get("isPercentage", True), "isPercentage"),
    )


def _build_fields(raw: Any) -> tuple[EditorField, ...]:
    if not isinstance(raw, list):
        raise PayloadError("'fields' must be a list", "fields")
    return tuple(_build_field(item, index) for index, item in enumerate(raw))


def _build_field(raw: Any, index: int) -> EditorField:
    prefix = f"fields[{index}]"
    if not isinstance(raw, dict):
        raise PayloadError(f"'{prefix}' must be an object", prefix)
    for name in ("id", "type", *_PLACEMENT_FIELDS):
        if raw.get(name) is None:
            raise PayloadError(f"Missing required fields: {prefix}.{name}", f"{prefix}.{name}")
    try:
        field_type = FieldType(str(raw["type"]).upper())
    except ValueError as exc:
        raise PayloadError(
            f"'{prefix}.type' must be one of {[t.value for t in FieldType]}", f"{prefix}.type"
        ) from exc
    return EditorField(
        id=str(raw["id"]),
        type=field_type,
        label=str(raw.get("label") or field_type.value.title()),
        x=_to_float(raw["x"], f"{prefix}.x"),
        y=_to_float(raw["y"], f"{prefix}.y"),
        width=_to_float(raw["width"], f"{prefix}.width"),
        height=_to_float(raw["height"], f"{prefix}.height"),
        page=_to_int(raw.get("page", 1) or 1, f"{prefix}.page"),
        value=str(raw.get("value") or ""),
    )


def _signature_placements(fields: tuple[EditorField, ...]) -> tuple[Placement, ...]:
    placements = tuple(to_placement(f) for f in fields if f.type == FieldType.SIGNATURE)
    if not placements:
        raise PayloadError("Please place a signature field first.", "fields")
    return placements


def _to_float(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise PayloadError(f"'{name}' must be a number", name)
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise PayloadError(f"'{name}' must be a number, got {value!r}", name) from exc
    if not math.isfinite(number):
        raise PayloadError(f"'{name}' must be finite, got {value!r}", name)
    return number


def _to_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise PayloadError(f"'{name}' must be an integer", name)
    if isinstance(value, float):
        if not value.is_integer():
            raise PayloadError(f"'{name}' must be an integer, got {value!r}", name)
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise PayloadError(f"'{name}' must be an integer, got {value!r}", name) from exc


def _to_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in {"true", "false", "1", "0"}:
        return value.lower() in {"true", "1"}
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise PayloadError(f"'{name}' must be a boolean, got {value!r}", name)
