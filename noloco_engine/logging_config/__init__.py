"""
Logging setup shared by the SDK, runners and trigger.
"""

from .config import get_logger, setup_logging
from .formatters import SimpleCloudWatchFormatter, StructuredCloudWatchFormatter

__all__ = [
    "setup_logging",
    "get_logger",
    "SimpleCloudWatchFormatter",
    "StructuredCloudWatchFormatter",
]
