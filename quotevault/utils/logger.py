"""
Structured logging for QuoteVault.

Every record is written as one JSON object. Records emitted while a request
is being served carry that request's id, so the lines of one request can be
grouped together.
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO

ROOT_LOGGER = "quotevault"

# Set by RequestLoggingMiddleware for the duration of a request
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# Keys the formatter owns; extra fields cannot overwrite them
RESERVED_KEYS = frozenset({"timestamp", "level", "service", "environment", "logger", "message", "request_id"})


class JSONFormatter(logging.Formatter):
    """Render log records as single-line JSON tagged with the service name."""

    def __init__(self, service: str = ROOT_LOGGER, environment: str = "development"):
        super().__init__()
        self.service = service
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "service": self.service,
            "environment": self.environment,
            "logger": record.name,
            "message": record.getMessage(),
            "source": f"{record.module}.{record.funcName}:{record.lineno}",
        }

        request_id = request_id_var.get()
        if request_id:
            entry["request_id"] = request_id

        for key, value in getattr(record, "extra_data", {}).items():
            if key not in RESERVED_KEYS:
                entry[key] = value

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def log_context(**fields: Any) -> Dict[str, Any]:
    """
    Build the ``extra`` argument for structured fields.

    Example:
        logger.warning("Quote not found", extra=log_context(quote_id=quote_id))
    """
    return {"extra_data": fields}


def configure_logging(
    debug: bool = False,
    service: str = ROOT_LOGGER,
    environment: str = "development",
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Send ``quotevault.*`` records to a stream as JSON.

    Calling it again replaces the previous handler, so each application
    built by ``create_app`` logs with its own settings.

    Args:
        debug: Log at DEBUG instead of INFO
        service: Service name written on every record
        environment: Deployment environment written on every record
        stream: Destination, defaults to stdout

    Returns:
        The package root logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.handlers.clear()
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    logger.propagate = False

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JSONFormatter(service=service, environment=environment))
    logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the ``quotevault`` namespace (usually for ``__name__``)."""
    if name == ROOT_LOGGER or name.startswith(f"{ROOT_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
