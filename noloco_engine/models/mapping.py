"""
Models exposed to the configuration UI: mapping columns, dropdown options
and list-search results.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class MappedType(str, Enum):
    """Surface types a configuration UI knows how to render."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    OPTIONS = "options"
    OBJECT = "object"


class ColumnOption(BaseModel):
    """One selectable value of an options column."""

    name: str = Field(..., description="Display label")
    value: str = Field(..., description="Value sent to the API")


class MappingColumn(BaseModel):
    """Typed descriptor for one editable field of a table."""

    id: str = Field(..., description="Stable column id used as the value key")
    display_name: str = Field(..., description="Label shown in the UI")
    type: MappedType = Field(default=MappedType.STRING)
    options: Optional[List[ColumnOption]] = Field(default=None)
    default_match: bool = Field(default=False)
    can_be_used_to_match: bool = Field(default=False)
    required: bool = Field(default=False)
    display: bool = Field(default=True)


class ResourceMapperFields(BaseModel):
    fields: List[MappingColumn] = Field(default_factory=list)


class NodePropertyOption(BaseModel):
    """Entry of a static dropdown."""

    name: str
    value: str
    description: Optional[str] = None


class ListSearchItem(BaseModel):
    name: str
    value: str


class ListSearchResult(BaseModel):
    """Searchable, paginated dropdown result."""

    results: List[ListSearchItem] = Field(default_factory=list)
    pagination_token: Optional[str] = None
