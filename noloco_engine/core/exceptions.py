"""Engine-level exceptions for the Noloco nodes."""

from __future__ import annotations

from typing import Optional


class EngineError(Exception):
    pass


class NodeOperationError(EngineError):
    """An operation failed while processing one input item."""

    def __init__(self, message: str, item_index: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.item_index = item_index


__all__ = [
    "EngineError",
    "NodeOperationError",
]
