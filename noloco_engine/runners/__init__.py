"""Runners for the Noloco nodes."""

from .external_actions import NolocoExternalAction, NolocoLoadOptions
from .pagination import RecordQuery, fetch_all_records

__all__ = [
    "NolocoExternalAction",
    "NolocoLoadOptions",
    "RecordQuery",
    "fetch_all_records",
]
