"""
Structured Logging Configuration Module

Provides JSON-formatted structured logging for all ledger operations.
Records emitted while an HTTP request is being served carry that request's
id, so one deposit or withdrawal can be followed across log lines.
"""

from contextvars import ContextVar
import logging
import json
from datetime import datetime, timezone
from typing import Optional


TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Set by the API middleware for the duration of one request
request_id_var = ContextVar("savings_ledger_request_id", default=None)


class RequestContextFilter(logging.Filter):
    """Stamp each record with the id of the request being served, if any"""

    def filter(self, record):
        if getattr(record, "request_id", None) is None:
            record.request_id = request_id_var.get()
        return True


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, 'request_id', None),
            "user_id": getattr(record, 'user_id', None),
            "action": getattr(record, 'action', None),
            "resource": getattr(record, 'resource', None),
            "extra": getattr(record, 'extra', None)
        }

        # Remove None values
        log_entry = {k: v for k, v in log_entry.items() if v is not None}

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def setup_logging(level: str = "INFO", logger_name: str = "savings_ledger",
                  log_format: str = "json", log_file: Optional[str] = None) -> logging.Logger:
    """
    Setup structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        logger_name: Name of the logger
        log_format: "json" for structured output, "text" for plain lines
        log_file: Optional file path; logs go to stderr when omitted

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(logger_name)

    # Remove existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    if log_file:
        handler = logging.FileHandler(log_file)
    else:
        handler = logging.StreamHandler()

    if log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    handler.addFilter(RequestContextFilter())

    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper()))

    # Prevent propagation to avoid duplicate logs
    logger.propagate = False

    return logger


def get_logger(name: str = "savings_ledger") -> logging.Logger:
    """Get logger instance"""
    return logging.getLogger(name)


def log_action(logger: logging.Logger, level: str, message: str,
               user_id: Optional[str] = None, action: Optional[str] = None,
               resource: Optional[str] = None, extra: Optional[dict] = None):
    """
    Log an action with structured data.

    Args:
        logger: Logger instance
        level: Log level (info, warning, error, etc.)
        message: Log message
        user_id: Account identity the action applies to
        action: Action being performed
        resource: Resource being acted upon
        extra: Additional structured data
    """
    levelno = getattr(logging, level.upper())
    if not logger.isEnabledFor(levelno):
        return

    record = logger.makeRecord(
        logger.name, levelno, __name__, 0, message, (), None
    )

    if user_id:
        record.user_id = user_id
    if action:
        record.action = action
    if resource:
        record.resource = resource
    if extra:
        record.extra = extra

    logger.handle(record)
