"""
Filter Builder

Builds Noloco filter expressions either from structured UI conditions or
from a raw JSON query. Both paths produce the same shape::

    {"<field id>": {"<operator>": value}}
    {"<field id>": {"not": {"equals": value}}}

Noloco combines top-level field entries with AND only; there is no
cross-field OR.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Union

from .exceptions import FilterParseError, FilterValidationError

logger = logging.getLogger(__name__)

FilterExpression = Dict[str, Dict[str, Any]]

EQUALS = "equals"
CONTAINS = "contains"
IN = "in"
NOT_IN = "notIn"
GREATER = "gt"
GREATER_OR_EQUAL = "gte"
LESS = "lt"
LESS_OR_EQUAL = "lte"
NOT = "not"

# UI-only operator, rewritten to {"not": {"equals": value}}
NOT_EQUALS = "not_equals"

FILTER_OPERATORS = (EQUALS, CONTAINS, IN, NOT_IN, GREATER, GREATER_OR_EQUAL, LESS, LESS_OR_EQUAL)
LIST_OPERATORS = (IN, NOT_IN)

FILTER_MODE_BUILDER = "builder"
FILTER_MODE_QUERY = "query"

INVALID_JSON_MESSAGE = "Invalid JSON in custom query. Please ensure your filter is valid JSON."


@dataclass
class FilterCondition:
    """One row of the UI filter builder."""

    field: str
    operator: str = EQUALS
    value: Any = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FilterCondition":
        return cls(
            field=data.get("field") or "",
            operator=data.get("operator") or EQUALS,
            value=data.get("value", ""),
        )


def _split_list_value(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [part.strip() for part in str(value).split(",")]


def build_filter_from_conditions(
    conditions: Iterable[Union[FilterCondition, Mapping[str, Any]]],
) -> Optional[FilterExpression]:
    """
    Build a filter expression from UI builder conditions.

    Conditions are ANDed. A later condition on the same field replaces an
    earlier one.

    Args:
        conditions: FilterCondition objects or their dict form

    Returns:
        Filter expression, or None when there are no conditions

    Raises:
        FilterParseError: When a condition has no field or an unknown operator
    """
    expression: FilterExpression = {}

    for raw_condition in conditions:
        condition = (
            raw_condition
            if isinstance(raw_condition, FilterCondition)
            else FilterCondition.from_dict(raw_condition)
        )
        if not condition.field:
            raise FilterParseError("Filter condition is missing a field")

        operator = condition.operator
        value = condition.value

        if operator in LIST_OPERATORS:
            value = _split_list_value(value)

        if operator == NOT_EQUALS:
            expression[condition.field] = {NOT: {EQUALS: value}}
        elif operator in FILTER_OPERATORS:
            expression[condition.field] = {operator: value}
        else:
            raise FilterParseError(f"Unsupported filter operator '{operator}'")

    return expression or None


def parse_raw_filter(raw: Any) -> Optional[FilterExpression]:
    """
    Parse a raw JSON filter.

    Args:
        raw: JSON text, or an already-decoded object

    Returns:
        Filter expression, or None for blank input

    Raises:
        FilterParseError: When the text is not valid JSON or not a JSON object
    """
    if raw is None:
        return None
    if isinstance(raw, dict):
        return raw
    if not isinstance(raw, str):
        raise FilterParseError(INVALID_JSON_MESSAGE)
    if not raw.strip():
        return None

    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.debug(f"Rejected raw filter: {e}")
        raise FilterParseError(INVALID_JSON_MESSAGE) from e

    if not isinstance(parsed, dict):
        raise FilterParseError("Filter must be a JSON object keyed by field API name")
    return parsed


def build_filter(
    mode: str,
    conditions: Optional[Iterable[Union[FilterCondition, Mapping[str, Any]]]] = None,
    raw: Any = None,
) -> Optional[FilterExpression]:
    """Build a filter from whichever input the selected mode uses."""
    if mode == FILTER_MODE_QUERY:
        return parse_raw_filter(raw)
    if mode == FILTER_MODE_BUILDER:
        return build_filter_from_conditions(conditions or [])
    raise FilterParseError(f"Unknown filter mode '{mode}'")


def validate_filter_fields(expression: Optional[FilterExpression], allowed_ids: Set[str]) -> None:
    """
    Ensure a filter only references filterable field ids.

    Raises:
        FilterValidationError: Listing every unknown field id
    """
    if not expression:
        return
    unknown = sorted(field_id for field_id in expression if field_id not in allowed_ids)
    if unknown:
        raise FilterValidationError(
            f"Filter references fields that cannot be filtered on: {', '.join(unknown)}"
        )
