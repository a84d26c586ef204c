"""
Record payload shaping for writes.

Mapping-column values arrive flat (``address__city``); the API expects
composite fields as nested objects (``{"address": {"city": ...}}``).
"""

from typing import Any, Dict, Mapping

from .exceptions import PayloadValidationError
from .field_mapping import ColumnKey


def transform_values_to_payload(values: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Nest composite sub-field values under their parent field.

    ``None`` values are dropped, so a write can omit a field but never clear it.

    Args:
        values: Flat mapping-column values

    Returns:
        Payload ready to send
    """
    payload: Dict[str, Any] = {}

    for column_id, value in values.items():
        if value is None:
            continue

        key = ColumnKey.from_wire(column_id)
        if key.sub_field is None:
            payload[key.field] = value
            continue

        parent = payload.get(key.field)
        if parent is None:
            parent = {}
        elif isinstance(parent, dict):
            # never mutate a dict that came in with the input values
            parent = dict(parent)
        else:
            raise PayloadValidationError(
                f"Field '{key.field}' was given both a direct value and sub-field '{key.sub_field}'"
            )
        parent[key.sub_field] = value
        payload[key.field] = parent

    return payload


def ensure_update_payload(payload: Mapping[str, Any]) -> None:
    """Reject an update that would send no fields."""
    if not payload:
        raise PayloadValidationError("At least one field must be provided for update")
