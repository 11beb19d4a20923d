"""Structured logging utilities."""

import json
import logging
from typing import Any, Dict, Optional

_RESERVED_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName", "relativeCreated",
    "thread", "threadName", "exc_info", "exc_text", "stack_info", "taskName",
}


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with JSON formatting configured."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


def log_fetch(
    logger: logging.Logger,
    issue_key: str,
    found: bool,
    duration_ms: int,
) -> None:
    """Log root issue fetch stage."""
    logger.info(
        "Root issue fetched" if found else "Root issue unavailable",
        extra={
            "issue_key": issue_key,
            "stage": "fetch",
            "found": found,
            "duration_ms": duration_ms,
        },
    )


def log_validation(
    logger: logging.Logger,
    issue_key: str,
    violation_count: int,
    duration_ms: int,
    rule_breakdown: Optional[Dict[str, int]] = None,
) -> None:
    """Log validation stage."""
    extra: Dict[str, Any] = {
        "issue_key": issue_key,
        "stage": "validate",
        "violation_count": violation_count,
        "duration_ms": duration_ms,
    }
    if rule_breakdown:
        extra["rule_breakdown"] = rule_breakdown
    logger.info(f"Validation of {issue_key} completed", extra=extra)
