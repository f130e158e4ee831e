"""Structured Logging — JSON log lines carrying who did what to which resource.

Invariants:
    - Every line has timestamp, level, logger, service, and message
    - Only allow-listed extras are emitted (LOG_EXTRA_KEYS); session tokens,
      résumé bytes, and cover letters never reach a log line
    - setup_logging is idempotent: calling it twice does not duplicate output

Design Decisions:
    - stdlib logging + a small JSONFormatter: services log with plain
      logger.info(..., extra={...}) and stay unaware of the output format
    - "text" format for local development, "json" everywhere else
"""

import json
import logging
from datetime import datetime, timezone

SERVICE_NAME = "hirepath-api"

LOG_EXTRA_KEYS: tuple[str, ...] = (
    "subject_id", "role", "action", "reason", "error_code", "path",
    "application_id", "job_id", "status_from", "status_to",
)

_TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def __init__(self, service: str = SERVICE_NAME):
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "service": self.service,
            "message": record.getMessage(),
        }
        entry.update(_extras(record))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def _extras(record: logging.LogRecord) -> dict:
    return {
        key: record.__dict__[key]
        for key in LOG_EXTRA_KEYS
        if record.__dict__.get(key) is not None
    }


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the HirePath handler on the root logger, replacing an earlier one."""
    root = logging.getLogger()
    for existing in list(root.handlers):
        if getattr(existing, "_hirepath", False):
            root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler._hirepath = True
    handler.setFormatter(
        JSONFormatter() if fmt == "json" else logging.Formatter(_TEXT_FORMAT),
    )
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
