from .execution import ExecutionStatus, LogLevel, NodeExecutionResult
from .mapping import (
    ColumnOption,
    ListSearchItem,
    ListSearchResult,
    MappedType,
    MappingColumn,
    NodePropertyOption,
    ResourceMapperFields,
)
from .workflow import Node

__all__ = [
    "ExecutionStatus",
    "LogLevel",
    "NodeExecutionResult",
    "ColumnOption",
    "ListSearchItem",
    "ListSearchResult",
    "MappedType",
    "MappingColumn",
    "NodePropertyOption",
    "ResourceMapperFields",
    "Node",
]
