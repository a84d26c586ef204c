"""
Node execution context for the Noloco nodes.

Provides a unified context for node execution with access to input items,
node configuration, per-item parameter resolution and execution metadata.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from noloco_engine.models.workflow import Node

# Signature of the host's parameter-resolution call: (name, item_index) -> value.
# Raises KeyError when the parameter is not set.
ParameterResolver = Callable[[str, int], Any]


def extract_locator_value(value: Any) -> Any:
    """Unwrap a resource-locator value ``{"mode": ..., "value": ...}``."""
    if isinstance(value, dict) and "mode" in value and "value" in value:
        return value["value"]
    return value


def split_include(raw: Any) -> Optional[List[str]]:
    """Turn ``"a, b"`` or ``["a", "b"]`` into a clean include list."""
    if not raw:
        return None
    parts = raw if isinstance(raw, (list, tuple)) else str(raw).split(",")
    include = [str(part).strip() for part in parts if str(part).strip()]
    return include or None


class NodeExecutionContext:
    """Context for node execution containing all necessary data and utilities."""

    def __init__(
        self,
        node: Node,
        items: Optional[List[Dict[str, Any]]] = None,
        item_parameters: Optional[List[Dict[str, Any]]] = None,
        parameter_resolver: Optional[ParameterResolver] = None,
        metadata: Optional[Dict[str, Any]] = None,
        manual: bool = False,
    ):
        self.node = node
        self.items = items if items is not None else [{}]
        self.item_parameters = item_parameters or []
        self.parameter_resolver = parameter_resolver or self._resolve_from_node
        self.metadata = metadata or {}
        self.manual = manual

    @property
    def node_id(self) -> str:
        """Get the node ID."""
        return self.node.id

    def continue_on_fail(self) -> bool:
        return self.node.continue_on_fail

    def _resolve_from_node(self, name: str, item_index: int) -> Any:
        if item_index < len(self.item_parameters) and name in self.item_parameters[item_index]:
            return self.item_parameters[item_index][name]
        return self.node.configurations[name]

    def get_node_parameter(
        self,
        name: str,
        item_index: int = 0,
        default: Any = None,
        extract_value: bool = False,
    ) -> Any:
        """
        Resolve a node parameter for one input item.

        Args:
            name: Parameter name
            item_index: Index of the input item being processed
            default: Returned when the parameter is not set
            extract_value: Unwrap resource-locator values to their plain value

        Returns:
            The resolved parameter value
        """
        try:
            value = self.parameter_resolver(name, item_index)
        except KeyError:
            return default
        if value is None:
            return default
        return extract_locator_value(value) if extract_value else value

    def get_item_json(self, item_index: int) -> Dict[str, Any]:
        """Get the JSON payload of an input item."""
        item = self.items[item_index] if item_index < len(self.items) else {}
        return item.get("json", item) if isinstance(item, dict) else {}

    def get_metadata(self, key: str, default: Any = None) -> Any:
        """Get metadata from the context."""
        return self.metadata.get(key, default)

    def set_metadata(self, key: str, value: Any) -> None:
        """Set metadata in the context."""
        self.metadata[key] = value

    def to_dict(self) -> Dict[str, Any]:
        """Convert context to dictionary representation."""
        return {
            "node_id": self.node_id,
            "item_count": len(self.items),
            "configurations": self.node.configurations,
            "metadata": self.metadata,
            "manual": self.manual,
        }


__all__ = ["NodeExecutionContext", "ParameterResolver", "extract_locator_value", "split_include"]
