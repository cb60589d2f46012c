"""
Structured logging for catalog storage.

Remote propagation happens in the background, so a failed write is only
visible in the logs. Records emitted through `StorageLoggerAdapter` carry
the catalog context (entity type, entity ID, operation, load source) and
`StructuredJsonFormatter` renders them as one JSON object per line, with the
details of any storage error attached.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from .exceptions import StorefrontStorageError

PACKAGE_LOGGER = "storefront_storage"

# Context keys the formatter lifts from a record into the JSON object
CONTEXT_FIELDS = ("entity", "entity_id", "operation", "source")


class StructuredJsonFormatter(logging.Formatter):
    """
    JSON formatter for catalog storage records.

    Each line holds:
    - timestamp: ISO 8601 in UTC
    - level, logger, message
    - the catalog context fields present on the record
    - error: type, message and details when the record carries a
      StorefrontStorageError (directly or as the cause of another error)
    - exception: formatted traceback, when exc_info is set
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_obj: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                log_obj[key] = value

        error = _storage_error(record)
        if error is not None:
            log_obj["error"] = {
                "type": type(error).__name__,
                "message": error.message,
                "details": error.details,
            }

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_obj, default=str, ensure_ascii=False)


def _storage_error(record: logging.LogRecord) -> StorefrontStorageError | None:
    """Find the storage error attached to a record, following __cause__ once."""
    error = getattr(record, "error", None)
    if error is None and record.exc_info:
        error = record.exc_info[1]
    if isinstance(error, StorefrontStorageError):
        return error
    cause = getattr(error, "__cause__", None)
    if isinstance(cause, StorefrontStorageError):
        return cause
    return None


def configure_structured_logging(
    level: int = logging.INFO,
    logger_name: str = PACKAGE_LOGGER,
) -> logging.Logger:
    """
    Send the package's records to stdout as JSON lines.

    Args:
        level: Logging level (default: INFO)
        logger_name: Logger to configure (default: the package namespace)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(logger_name)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredJsonFormatter())

    logger.addHandler(handler)
    logger.setLevel(level)

    return logger


def get_storage_logger(name: str) -> logging.Logger:
    """Logger named 'storefront_storage.{name}'."""
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")


class StorageLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter attaching catalog context to every record.

    Per-call `extra` values win over the adapter's own, so one adapter per
    entity type can still tag each record with the entity ID it concerns.
    """

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        """Merge the adapter's context under the call's extra."""
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs

    def bind(self, **context: Any) -> "StorageLoggerAdapter":
        """Return an adapter with additional context fields."""
        return StorageLoggerAdapter(self.logger, {**self.extra, **context})
