"""Custom logging formatters."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime

# Fields that are part of the standard LogRecord, not user-provided extras
RESERVED_LOG_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}


def _get_extra_fields(record: logging.LogRecord) -> dict:
    """Extract extra fields (attribute, helper, ...) from a log record."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in RESERVED_LOG_ATTRS and not key.startswith("_")
    }


class JsonFormatter(logging.Formatter):
    """Format log records as one JSON object per line.

    Extra fields passed via ``logger.debug("event", extra={...})`` become
    top-level keys. Values that can't be serialized are stored as ``str()``.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in _get_extra_fields(record).items():
            try:
                json.dumps(value)
                log_data[key] = value
            except (TypeError, ValueError):
                log_data[key] = str(value)

        return json.dumps(log_data)


class DevFormatter(logging.Formatter):
    """Human-readable formatter for development that includes extra fields.

    Format: timestamp LEVEL    logger message | key='value' key2='value2'
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = self.formatTime(record, "%Y-%m-%d %H:%M:%S")
        line = f"{timestamp} {record.levelname:8} {record.name} {record.getMessage()}"

        extras = _get_extra_fields(record)
        if extras:
            line = f"{line} | " + " ".join(f"{k}={v!r}" for k, v in extras.items())

        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"

        return line
