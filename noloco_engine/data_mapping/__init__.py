# Schema mapping, filter building and payload shaping for Noloco

from .exceptions import (
    DataMappingError,
    FilterParseError,
    FilterValidationError,
    PayloadValidationError,
)
from .field_mapping import (
    SYSTEM_FIELDS,
    ColumnKey,
    build_field_options,
    build_mapping_columns,
    build_searchable_field_options,
    field_kind_to_mapped_type,
    field_to_searchable_type,
    find_field_for_column,
    searchable_field_ids,
)
from .filters import (
    FilterCondition,
    FilterExpression,
    build_filter,
    build_filter_from_conditions,
    parse_raw_filter,
    validate_filter_fields,
)
from .payload import ensure_update_payload, transform_values_to_payload

__all__ = [
    # Field mapping
    "SYSTEM_FIELDS",
    "ColumnKey",
    "build_mapping_columns",
    "build_field_options",
    "build_searchable_field_options",
    "field_kind_to_mapped_type",
    "field_to_searchable_type",
    "find_field_for_column",
    "searchable_field_ids",
    # Filters
    "FilterCondition",
    "FilterExpression",
    "build_filter",
    "build_filter_from_conditions",
    "parse_raw_filter",
    "validate_filter_fields",
    # Payload
    "transform_values_to_payload",
    "ensure_update_payload",
    # Exceptions
    "DataMappingError",
    "FilterParseError",
    "FilterValidationError",
    "PayloadValidationError",
]
