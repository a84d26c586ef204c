"""
Data models for Noloco SDK.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class FieldKind(str, Enum):
    """Primitive data types a Noloco field can declare."""

    TEXT = "TEXT"
    DATE = "DATE"
    INTEGER = "INTEGER"
    DECIMAL = "DECIMAL"
    DURATION = "DURATION"
    BOOLEAN = "BOOLEAN"
    RICH_TEXT = "RICH_TEXT"
    SINGLE_OPTION = "SINGLE_OPTION"
    MULTIPLE_OPTION = "MULTIPLE_OPTION"
    OBJECT = "OBJECT"

    @classmethod
    def parse(cls, raw: Any) -> Optional["FieldKind"]:
        """Return the kind for a raw type string, or None when it is not one we know."""
        try:
            return cls(raw)
        except ValueError:
            return None


class RelationshipType(str, Enum):
    """Cardinality of a relationship field."""

    ONE_TO_ONE = "ONE_TO_ONE"
    ONE_TO_MANY = "ONE_TO_MANY"
    MANY_TO_ONE = "MANY_TO_ONE"
    MANY_TO_MANY = "MANY_TO_MANY"

    @classmethod
    def parse(cls, raw: Any) -> Optional["RelationshipType"]:
        try:
            return cls(raw)
        except ValueError:
            return None


def is_multi_relationship(relationship: Optional[RelationshipType]) -> bool:
    """Check if a relationship type points at multiple records."""
    return relationship in (RelationshipType.ONE_TO_MANY, RelationshipType.MANY_TO_MANY)


def is_reverse_multi_relationship(relationship: Optional[RelationshipType]) -> bool:
    """Check if the reverse side of a relationship points at multiple records."""
    return relationship in (RelationshipType.MANY_TO_ONE, RelationshipType.MANY_TO_MANY)


def reverse_relationship(relationship: RelationshipType) -> RelationshipType:
    """Return the relationship type as seen from the target table."""
    if relationship == RelationshipType.ONE_TO_MANY:
        return RelationshipType.MANY_TO_ONE
    if relationship == RelationshipType.MANY_TO_ONE:
        return RelationshipType.ONE_TO_MANY
    return relationship


# Composite (OBJECT) field formats
ADDRESS = "address"
COORDINATES = "coordinates"
DATE_RANGE = "dateRange"
DUE_DATE = "dueDate"
FULL_NAME = "fullName"
PHONE_NUMBER = "phoneNumber"

# Child display labels per format. The schema API does not always send them.
SUB_FIELD_LAYOUTS: Dict[str, Dict[str, str]] = {
    ADDRESS: {
        "street": "Street",
        "suiteAptBldg": "Suite / Apt. / Building",
        "city": "City",
        "stateRegion": "State / Region",
        "postalCode": "Postal Code",
        "country": "Country",
    },
    COORDINATES: {
        "latitude": "Latitude",
        "longitude": "Longitude",
    },
    DATE_RANGE: {
        "from": "From",
        "to": "To",
    },
    DUE_DATE: {
        "from": "Start (optional)",
        "to": "Due",
        "overdue": "Overdue",
        "complete": "Complete",
    },
    FULL_NAME: {
        "title": "Title",
        "first": "First Name",
        "middle": "Middle Name",
        "last": "Last Name",
    },
    PHONE_NUMBER: {
        "country": "Country",
        "number": "Number",
    },
}


@dataclass
class App:
    """Represents a Noloco app the account can access."""
    id: str
    name: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "App":
        return cls(id=str(data.get("id", "")), name=data.get("name", ""))


@dataclass
class FieldOption:
    """One choice of a SINGLE_OPTION / MULTIPLE_OPTION field."""
    name: str
    display: str
    id: int = 0
    color: Optional[str] = None
    order: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int = 0) -> "FieldOption":
        name = data.get("name", "")
        return cls(
            id=data.get("id", index),
            name=name,
            display=data.get("display") or name,
            color=data.get("color"),
            order=data.get("order", index),
        )


def parse_options(raw: Any) -> List[FieldOption]:
    """Parse an option list, skipping entries that are not objects."""
    if not isinstance(raw, list):
        return []
    return [FieldOption.from_dict(opt, idx) for idx, opt in enumerate(raw) if isinstance(opt, dict)]


@dataclass
class Table:
    """Represents a Noloco table (data type)."""
    id: int = 0
    name: str = ""
    api_name: str = ""
    display: str = ""
    description: Optional[str] = None
    enabled: bool = True
    source: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Table":
        api_name = data.get("apiName") or data.get("name", "")
        return cls(
            id=data.get("id", 0),
            name=data.get("name", api_name),
            api_name=api_name,
            display=data.get("display") or api_name,
            description=data.get("description"),
            enabled=data.get("enabled", True),
            source=data.get("source"),
        )


@dataclass
class Field:
    """Represents one field definition of a table schema."""
    api_name: str
    display: str
    type: str
    id: int = 0
    name: str = ""
    type_options: Optional[Dict[str, Any]] = None
    multiple: bool = False
    unique: bool = False
    options: List[FieldOption] = field(default_factory=list)
    relationship: Optional[str] = None
    reverse_relationship: Optional[Dict[str, Any]] = None
    relationship_data_type: Optional["TableSchema"] = None

    @property
    def kind(self) -> Optional[FieldKind]:
        return FieldKind.parse(self.type)

    @property
    def relationship_type(self) -> Optional[RelationshipType]:
        return RelationshipType.parse(self.relationship)

    @property
    def is_relationship(self) -> bool:
        return bool(self.relationship)

    @property
    def object_format(self) -> Optional[str]:
        if not isinstance(self.type_options, dict):
            return None
        return self.type_options.get("format")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Field":
        """Create Field from a schema API response entry."""
        api_name = data.get("apiName") or data.get("name", "")
        related = data.get("relationshipDataType")
        return cls(
            id=data.get("id", 0),
            name=data.get("name", api_name),
            api_name=api_name,
            display=data.get("display") or api_name,
            type=data.get("type") or "",
            type_options=data.get("typeOptions"),
            multiple=bool(data.get("multiple", False)),
            unique=bool(data.get("unique", False)),
            options=parse_options(data.get("options")),
            relationship=data.get("relationship"),
            reverse_relationship=data.get("reverseRelationship"),
            relationship_data_type=TableSchema.from_dict(related) if related else None,
        )


@dataclass
class TableSchema(Table):
    """A table together with its ordered field definitions."""
    fields: List[Field] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TableSchema":
        table = Table.from_dict(data)
        return cls(
            **table.__dict__,
            fields=[Field.from_dict(f) for f in data.get("fields") or []],
        )

    def get_field(self, api_name: str) -> Optional[Field]:
        for candidate in self.fields:
            if candidate.api_name == api_name:
                return candidate
        return None


def get_sub_fields(parent: Field) -> List[Field]:
    """
    Get the declared sub-fields of an OBJECT field.

    Sub-fields come from ``typeOptions.subFields`` (only present when the schema is
    fetched with ``format=input``). Formats without a registered layout yield no
    sub-fields.

    Args:
        parent: The OBJECT field

    Returns:
        Child Field objects in declaration order
    """
    layout_format = parent.object_format
    if not layout_format or layout_format not in SUB_FIELD_LAYOUTS:
        return []

    declared = (parent.type_options or {}).get("subFields")
    if not declared or not isinstance(declared, dict):
        return []

    labels = SUB_FIELD_LAYOUTS[layout_format]
    sub_fields = []
    for api_name, sub_field in declared.items():
        if isinstance(sub_field, str):
            sub_field = {"type": sub_field}
        elif not isinstance(sub_field, dict):
            sub_field = {}
        sub_fields.append(
            Field(
                api_name=api_name,
                name=api_name,
                display=labels.get(api_name, api_name),
                type=sub_field.get("type") or FieldKind.TEXT.value,
                type_options=sub_field.get("typeOptions"),
                options=parse_options(sub_field.get("options")),
            )
        )
    return sub_fields


@dataclass
class PageInfo:
    """Cursor metadata of one page of records."""
    has_next_page: bool = False
    has_previous_page: bool = False
    start_cursor: Optional[str] = None
    end_cursor: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PageInfo":
        data = data or {}
        return cls(
            has_next_page=data.get("hasNextPage") is True,
            has_previous_page=data.get("hasPreviousPage") is True,
            start_cursor=data.get("startCursor"),
            end_cursor=data.get("endCursor"),
        )


@dataclass
class RecordsPage:
    """One page of records returned by the data API."""
    records: List[Dict[str, Any]] = field(default_factory=list)
    page_info: PageInfo = field(default_factory=PageInfo)
    total_count: int = 0

    @property
    def next_cursor(self) -> Optional[str]:
        """Cursor for the following page, or None when the stream has ended."""
        if self.page_info.has_next_page and self.page_info.end_cursor:
            return self.page_info.end_cursor
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RecordsPage":
        records = data.get("records") or []
        return cls(
            records=list(records),
            page_info=PageInfo.from_dict(data.get("pageInfo")),
            total_count=data.get("totalCount", len(records)),
        )


@dataclass
class RecordsQueryParams:
    """Query string parameters for the list-records endpoint."""
    sort_by: Optional[str] = None
    order_by: Optional[str] = None
    first: Optional[int] = None
    after: Optional[str] = None
    before: Optional[str] = None
    filter: Optional[Dict[str, Any]] = None
    include: Optional[List[str]] = None
