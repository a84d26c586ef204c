"""
Trigger implementations for the Noloco nodes
"""

from .noloco_trigger import NolocoTrigger, PollResult

__all__ = [
    "NolocoTrigger",
    "PollResult",
]
