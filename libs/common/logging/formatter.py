"""JSON log formatter for structured logging.

Example log output:
    {
        "timestamp": "2026-10-18T10:30:00.000Z",
        "level": "WARNING",
        "service": "credential_health_check",
        "logger": "libs.credentials.client",
        "message": "Credential fetch attempt 1 failed, retrying in 1000ms",
        "context": {
            "secret_name": "signal9-advisor/api-credentials",
            "attempt": 1,
            "delay_ms": 1000
        }
    }
"""

import json
import logging
import traceback
from datetime import UTC, datetime
from typing import Any

# Attributes every LogRecord carries; anything else came in through extra={...}.
_RESERVED_FIELDS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}


class JSONFormatter(logging.Formatter):
    """Formatter that renders each record as one JSON object per line.

    Fields passed through ``extra`` are collected under ``context``.

    Attributes:
        service_name: Name of the service emitting logs
        include_context: Whether to include extra fields
    """

    def __init__(self, service_name: str, include_context: bool = True) -> None:
        super().__init__()
        self.service_name = service_name
        self.include_context = include_context

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self._format_timestamp(record.created),
            "level": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_context:
            context = self._extract_context(record)
            if context:
                log_entry["context"] = context

        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": "".join(traceback.format_exception(*record.exc_info)),
            }

        return json.dumps(log_entry, default=str)

    def _format_timestamp(self, created: float) -> str:
        """Format a LogRecord timestamp as ISO 8601 UTC with milliseconds."""
        dt = datetime.fromtimestamp(created, tz=UTC)
        return dt.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    def _extract_context(self, record: logging.LogRecord) -> dict[str, Any]:
        return {
            key: value for key, value in record.__dict__.items() if key not in _RESERVED_FIELDS
        }
