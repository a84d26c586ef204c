"""
Field Mapping

Translates a discovered Noloco table schema into the typed mapping columns
and dropdown options used by the node configuration UI.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from noloco_engine.models.mapping import (
    ColumnOption,
    MappedType,
    MappingColumn,
    NodePropertyOption,
)
from noloco_engine.sdks.noloco_sdk.models import (
    Field,
    FieldKind,
    TableSchema,
    get_sub_fields,
)

logger = logging.getLogger(__name__)

# Maintained by Noloco; never editable, never mapped
SYSTEM_FIELDS = ("id", "uuid", "createdAt", "updatedAt")

SUB_FIELD_SEPARATOR = "__"
RELATIONSHIP_ID_SUFFIX = "Id"

_MAPPED_TYPES: Dict[FieldKind, MappedType] = {
    FieldKind.TEXT: MappedType.STRING,
    FieldKind.RICH_TEXT: MappedType.STRING,
    FieldKind.DURATION: MappedType.STRING,
    FieldKind.SINGLE_OPTION: MappedType.OPTIONS,
    FieldKind.MULTIPLE_OPTION: MappedType.OPTIONS,
    FieldKind.INTEGER: MappedType.NUMBER,
    FieldKind.DECIMAL: MappedType.NUMBER,
    FieldKind.BOOLEAN: MappedType.BOOLEAN,
    FieldKind.DATE: MappedType.DATETIME,
    FieldKind.OBJECT: MappedType.OBJECT,
}

# Kinds that can be compared in a filter. RICH_TEXT and OBJECT are not.
_SEARCHABLE_TYPES: Dict[FieldKind, MappedType] = {
    FieldKind.TEXT: MappedType.STRING,
    FieldKind.SINGLE_OPTION: MappedType.STRING,
    FieldKind.MULTIPLE_OPTION: MappedType.STRING,
    FieldKind.DURATION: MappedType.STRING,
    FieldKind.INTEGER: MappedType.NUMBER,
    FieldKind.DECIMAL: MappedType.NUMBER,
    FieldKind.BOOLEAN: MappedType.BOOLEAN,
    FieldKind.DATE: MappedType.DATETIME,
}


def field_kind_to_mapped_type(kind: Optional[FieldKind]) -> MappedType:
    """Map a field kind to its UI surface type. Unknown kinds render as strings."""
    return _MAPPED_TYPES.get(kind, MappedType.STRING)


def field_to_searchable_type(kind: Optional[FieldKind]) -> Optional[MappedType]:
    """Map a field kind to a filterable type, or None when it cannot be filtered on."""
    return _SEARCHABLE_TYPES.get(kind)


@dataclass(frozen=True)
class ColumnKey:
    """
    Identity of a mapping column: a top-level field, or one sub-field of a
    composite field. Only ``to_wire`` knows about the ``parent__child`` form.
    """

    field: str
    sub_field: Optional[str] = None

    def to_wire(self) -> str:
        if self.sub_field is None:
            return self.field
        return f"{self.field}{SUB_FIELD_SEPARATOR}{self.sub_field}"

    @classmethod
    def from_wire(cls, column_id: str) -> "ColumnKey":
        """Split a wire id at the first separator."""
        if SUB_FIELD_SEPARATOR not in column_id:
            return cls(column_id)
        parent, child = column_id.split(SUB_FIELD_SEPARATOR, 1)
        return cls(parent, child)


def column_id_for_field(field: Field) -> str:
    """Value key of a top-level field. Relationships are written by record id."""
    if field.is_relationship:
        return f"{field.api_name}{RELATIONSHIP_ID_SUFFIX}"
    return field.api_name


def _column_type(field: Field) -> MappedType:
    if field.is_relationship:
        return MappedType.NUMBER
    return field_kind_to_mapped_type(field.kind)


def _column_options(field: Field) -> Optional[List[ColumnOption]]:
    if not field.options:
        return None
    return [ColumnOption(name=option.display, value=option.name) for option in field.options]


def _expand_composite(field: Field) -> List[MappingColumn]:
    return [
        MappingColumn(
            id=ColumnKey(field.api_name, sub_field.api_name).to_wire(),
            display_name=f"{field.display} > {sub_field.display}",
            type=_column_type(sub_field),
            options=_column_options(sub_field),
        )
        for sub_field in get_sub_fields(field)
    ]


def build_mapping_columns(schema: TableSchema) -> List[MappingColumn]:
    """
    Build the ordered mapping columns for a table.

    System fields are skipped. OBJECT fields are replaced by one column per
    declared sub-field; an OBJECT field without a registered layout or without
    declared sub-fields produces no column. Relationship fields become numeric
    ``<apiName>Id`` columns.

    Args:
        schema: Table schema fetched with ``format=input``

    Returns:
        Mapping columns in schema order
    """
    columns: List[MappingColumn] = []
    seen: Set[str] = set()

    for field in schema.fields:
        if field.api_name in SYSTEM_FIELDS:
            continue

        if field.kind == FieldKind.OBJECT:
            candidates = _expand_composite(field)
            if not candidates:
                logger.debug(
                    f"Skipping composite field '{field.api_name}' of table '{schema.api_name}': "
                    f"no sub-field layout for format {field.object_format!r}"
                )
        else:
            candidates = [
                MappingColumn(
                    id=column_id_for_field(field),
                    display_name=field.display,
                    type=_column_type(field),
                    options=_column_options(field),
                )
            ]

        for column in candidates:
            if column.id in seen:
                logger.warning(
                    f"Duplicate mapping column id '{column.id}' in table '{schema.api_name}', keeping the first"
                )
                continue
            seen.add(column.id)
            columns.append(column)

    return columns


def _describe_field(field: Field) -> str:
    description = field.type
    if field.is_relationship:
        description = f"Relationship ({field.relationship}) - use record ID"
    if field.options:
        description = f"{field.type} - {len(field.options)} options"
    if field.unique:
        description = f"{description} (unique)"
    return description


def build_field_options(schema: TableSchema) -> List[NodePropertyOption]:
    """Dropdown of editable fields: searchable-typed fields and relationships."""
    return [
        NodePropertyOption(
            name=field.display,
            value=column_id_for_field(field),
            description=_describe_field(field),
        )
        for field in schema.fields
        if field.api_name not in SYSTEM_FIELDS
        and (field_to_searchable_type(field.kind) is not None or field.is_relationship)
    ]


def build_searchable_field_options(schema: TableSchema) -> List[NodePropertyOption]:
    """Dropdown of fields usable in filters and sort rules, record ID first."""
    options = [NodePropertyOption(name="ID", value="id", description="Record ID (unique)")]
    for field in schema.fields:
        if field.api_name == "id" or field_to_searchable_type(field.kind) is None:
            continue
        description = f"{field.type} (unique)" if field.unique else field.type
        options.append(
            NodePropertyOption(name=field.display, value=field.api_name, description=description)
        )
    return options


def searchable_field_ids(schema: TableSchema) -> Set[str]:
    """Field ids a filter expression may reference."""
    return {option.value for option in build_searchable_field_options(schema)}


def find_field_for_column(schema: TableSchema, column_id: str) -> Optional[Field]:
    """Find the schema field behind a column id, accepting the relationship ``Id`` form."""
    for field in schema.fields:
        if field.api_name == column_id:
            return field
    for field in schema.fields:
        if field.is_relationship and column_id_for_field(field) == column_id:
            return field
    if column_id.endswith(RELATIONSHIP_ID_SUFFIX):
        return schema.get_field(column_id[: -len(RELATIONSHIP_ID_SUFFIX)])
    return None
