"""Structured Logging - JSON formatter and setup.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (operation, prefix, path, error_code) surfaced when present
    - JSON format in production, human-readable otherwise
"""

import json
import logging
from datetime import datetime, timezone

EXTRA_FIELDS = (
    "service", "operation", "prefix", "path", "error_code", "status_code",
)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure root logging. Safe to call more than once."""
    for existing in list(logging.root.handlers):
        if getattr(existing, "_lazyrest", False):
            logging.root.removeHandler(existing)
    handler = logging.StreamHandler()
    handler._lazyrest = True
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
