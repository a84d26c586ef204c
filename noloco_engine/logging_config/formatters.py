"""
Log formatters for console and log-aggregation output.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict

# Extras the Noloco runners attach to their records, shown inline by the text formatter
CONTEXT_FIELDS = ("node_id", "item_index", "project", "table")

# LogRecord attributes that are not user-supplied extras
_RECORD_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName",
    "relativeCreated", "thread", "threadName", "exc_info",
    "exc_text", "stack_info", "taskName", "tracking_id",
}


def _record_extras(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RECORD_ATTRS and not key.startswith("_")
    }


class SimpleCloudWatchFormatter(logging.Formatter):
    """
    Single-line text formatter. Runner context extras follow the location.
    Example: INFO:     2025-08-11 14:03:25 - noloco_engine.runners - [pagination.py:88] [node_id=n1] - Fetched 100 records
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")

        tags = []
        tracking_id = getattr(record, "tracking_id", None)
        if tracking_id and tracking_id != "unknown":
            tags.append(f"[Trace:{tracking_id}]")
        context = [
            f"{name}={getattr(record, name)}" for name in CONTEXT_FIELDS if hasattr(record, name)
        ]
        if context:
            tags.append(f"[{' '.join(context)}]")

        prefix = f"{record.levelname}:     {timestamp} - {record.name} - [{record.filename}:{record.lineno}]"
        formatted = " ".join([prefix, *tags]) + f" - {record.getMessage()}"

        if record.exc_info:
            formatted += f"\n{self.formatException(record.exc_info)}"
        return formatted


class StructuredCloudWatchFormatter(logging.Formatter):
    """
    JSON formatter, one object per line, with extra context fields
    (node_id, project, table, item_index, ...) carried under "extra".
    """

    def format(self, record: logging.LogRecord) -> str:
        log_obj: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "file": f"{record.filename}:{record.lineno}",
            "function": record.funcName,
        }

        if hasattr(record, "tracking_id"):
            log_obj["tracking_id"] = record.tracking_id

        if record.exc_info:
            exc_type, exc_value = record.exc_info[0], record.exc_info[1]
            log_obj["exception"] = {
                "type": exc_type.__name__ if exc_type else "Unknown",
                "message": str(exc_value) if exc_value else "",
                "traceback": self.formatException(record.exc_info),
            }

        extras = _record_extras(record)
        if extras:
            log_obj["extra"] = extras

        return json.dumps(log_obj, ensure_ascii=False, default=str)
