"""External action implementations for the Noloco nodes."""

from .base_external_action import BaseExternalAction
from .noloco_external_action import NolocoExternalAction
from .noloco_load_options import NolocoLoadOptions

__all__ = [
    "BaseExternalAction",
    "NolocoExternalAction",
    "NolocoLoadOptions",
]
