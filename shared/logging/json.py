"""JSON log output shared by the ingestion API and the widget pipeline.

Each record becomes one JSON object: a fixed envelope (timestamp, level,
logger, message, service, environment, host, pid, source location) followed
by whatever structured fields the call site passed through ``extra=``.
Keys matching a redaction pattern are masked at any nesting depth before
serialisation; visitor cookies and API tokens never reach the log sink.
"""

from __future__ import annotations

import json
import logging
import os
import socket
import traceback
from datetime import datetime, timezone
from typing import Any, Iterable

from shared.logging.logger import mark_configured

REDACTED = "[REDACTED]"

# Everything a bare LogRecord carries; anything else on a record came from extra=
_STANDARD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {
    "message",
    "asctime",
    "taskName",
}


class SensitiveDataFilter:
    """Masks values whose key contains any of the (case-insensitive) patterns."""

    def __init__(self, patterns: Iterable[str]):
        self.patterns = tuple(p.lower() for p in patterns)

    def _is_sensitive(self, key: str) -> bool:
        lowered = key.lower()
        return any(p in lowered for p in self.patterns)

    def _scrub(self, value: Any) -> Any:
        if isinstance(value, dict):
            return self.filter(value)
        if isinstance(value, (list, tuple)):
            return [self._scrub(v) for v in value]
        return value

    def filter(self, data: dict) -> dict:
        return {
            k: REDACTED if self._is_sensitive(str(k)) else self._scrub(v)
            for k, v in data.items()
        }


class CustomJsonFormatter(logging.Formatter):
    def __init__(
        self,
        service: str,
        environment: str,
        redaction_patterns: Iterable[str],
    ):
        super().__init__()
        self.hostname = socket.gethostname()
        self.pid = os.getpid()
        self.service_name = service
        self.environment = environment
        self.sensitive_filter = SensitiveDataFilter(redaction_patterns)

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            "environment": self.environment,
            "hostname": self.hostname,
            "pid": self.pid,
            "location": f"{record.module}:{record.lineno}",
        }
        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS:
                data.setdefault(key, value)
        if record.exc_info:
            data["exception"] = self.format_exception(record.exc_info)
        return json.dumps(self.sensitive_filter.filter(data), default=str)

    @staticmethod
    def format_exception(exc_info) -> dict[str, Any]:
        exc_type, exc, tb = exc_info
        return {
            "type": exc_type.__name__,
            "message": str(exc),
            "stack": traceback.format_tb(tb),
        }


def configure_logging(
    service: str,
    environment: str,
    level: str,
    redaction_patterns: Iterable[str],
) -> logging.Logger:
    """Route every logger through one JSON stream handler on the root logger."""
    handler = logging.StreamHandler()
    handler.setFormatter(CustomJsonFormatter(service, environment, redaction_patterns))
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    mark_configured()
    return root


__all__ = [
    "CustomJsonFormatter",
    "REDACTED",
    "SensitiveDataFilter",
    "configure_logging",
]
