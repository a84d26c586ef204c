"""
Logging configuration for the Noloco nodes.
"""

import logging
import sys
from typing import Optional

from .formatters import SimpleCloudWatchFormatter, StructuredCloudWatchFormatter

STANDARD_FORMAT = "%(levelname)s:     %(asctime)s - %(name)s - [%(filename)s:%(lineno)d] - %(message)s"

# Request timing is logged by NolocoClient itself
NOISY_LOGGERS = ["httpx", "httpcore", "asyncio"]


def build_formatter(log_format: str) -> logging.Formatter:
    """Formatter for "json", "simple", anything else gets the standard layout."""
    if log_format == "json":
        return StructuredCloudWatchFormatter()
    if log_format == "simple":
        return SimpleCloudWatchFormatter()
    return logging.Formatter(fmt=STANDARD_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def setup_logging(
    service_name: str = "noloco-engine",
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
) -> logging.Logger:
    """
    Route all Noloco engine logging to stdout.

    Args:
        service_name: Name of the logger returned to the caller
        log_level: DEBUG, INFO, WARNING or ERROR; falls back to LOG_LEVEL
        log_format: "simple", "json" or "standard"; falls back to LOG_FORMAT

    Returns:
        Configured logger instance
    """
    from noloco_engine.core.config import get_settings

    settings = get_settings()
    log_level = (log_level or settings.log_level).upper()
    log_format = log_format or settings.log_format
    level = getattr(logging, log_level, logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(build_formatter(log_format))

    root_logger = logging.getLogger()
    # Clear existing handlers to avoid duplicates
    root_logger.handlers.clear()
    root_logger.setLevel(level)
    root_logger.addHandler(handler)

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    logger = logging.getLogger(service_name)
    logger.info(f"Logging configured for {service_name} with level={log_level}, format={log_format}")
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the specified name."""
    return logging.getLogger(name)
