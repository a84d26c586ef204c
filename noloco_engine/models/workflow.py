"""
Workflow node definition as seen by the Noloco runners.
"""

from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator


class Node(BaseModel):
    """A configured node inside a workflow."""

    id: str = Field(..., description="Unique node identifier")
    name: str = Field(..., description="Node name, no spaces")
    type: str = Field(default="EXTERNAL_ACTION", description="Node category")
    subtype: str = Field(default="NOLOCO", description="Node subtype")
    configurations: Dict[str, Any] = Field(
        default_factory=dict, description="Static node parameters"
    )
    continue_on_fail: bool = Field(
        default=False, description="Report item failures as output instead of aborting"
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if " " in v:
            raise ValueError("Node name must not contain spaces")
        return v
