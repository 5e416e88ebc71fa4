"""Structured Logging — JSON formatter and setup for machine-readable run logs.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (analyzer, artifact, finding_count, ...) surfaced when present
    - JSON format for pipelines, human-readable text for terminals
    - Logs go to stderr so the report on stdout stays clean

Design Decisions:
    - setup_logging called once per process: by the CLI entry point or the API lifespan
"""

import json
import logging
import sys
from datetime import datetime, timezone

_EXTRA_KEYS = (
    "analyzer", "artifact", "finding_count", "error_code", "path", "section", "infected",
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
        for key in _EXTRA_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Configure root logging for the process."""
    handler = logging.StreamHandler(sys.stderr)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    logging.root.handlers = [handler]
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
