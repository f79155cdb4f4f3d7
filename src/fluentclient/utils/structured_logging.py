r"""Structured logging utilities for retry diagnostics.

The retry coordinator attaches machine-readable fields (``attempt``,
``delay``, ``method``, ``url``, ``status_code``) to its log records. The
formatter in this module renders those records as JSON lines, which is
convenient for log aggregation. It is opt-in: nothing is configured until
a handler uses ``StructuredFormatter``.

Example:
    ```python
    import logging
    from fluentclient.utils.structured_logging import StructuredFormatter, set_correlation_id

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logger = logging.getLogger("fluentclient")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    set_correlation_id("order-sync-42")
    ```
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_correlation_id",
    "get_correlation_id",
    "log_structured",
    "set_correlation_id",
]

import contextvars
import json
import logging
import time
from typing import Any

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "fluentclient_correlation_id", default=None
)

# Attributes every LogRecord has; anything else came in through ``extra``
_RECORD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def get_correlation_id() -> str | None:
    """Get the correlation ID of the current context.

    Returns:
        The current correlation ID, or ``None`` if not set.

    Example:
        ```pycon
        >>> from fluentclient.utils.structured_logging import (
        ...     get_correlation_id,
        ...     set_correlation_id,
        ... )
        >>> set_correlation_id("req-123")
        >>> get_correlation_id()
        'req-123'

        ```
    """
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current context.

    The value lives in a context variable, so concurrent coordinations
    running in different tasks keep their own IDs.

    Args:
        correlation_id: The correlation ID (e.g. request ID, trace ID).
    """
    _correlation_id.set(correlation_id)


def clear_correlation_id() -> None:
    """Clear the correlation ID for the current context."""
    _correlation_id.set(None)


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Standard fields are ``timestamp``, ``level``, ``logger``, ``message``,
    ``module``, ``function`` and ``line``. The correlation ID is added when
    set, the formatted traceback when the record carries exception info,
    and every field passed through ``extra``.

    Example:
        ```pycon
        >>> import json
        >>> import logging
        >>> from fluentclient.utils.structured_logging import StructuredFormatter
        >>> record = logging.makeLogRecord({"msg": "retrying", "attempt": 2})
        >>> data = json.loads(StructuredFormatter().format(record))
        >>> data["message"], data["attempt"]
        ('retrying', 2)

        ```
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        correlation_id = get_correlation_id()
        if correlation_id is not None:
            log_data["correlation_id"] = correlation_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRIBUTES:
                log_data[key] = value

        return json.dumps(log_data, default=str)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: ARG002
        """Format the record time as ISO 8601 UTC with milliseconds."""
        return (
            time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
            + f".{int(record.msecs):03d}Z"
        )


def log_structured(logger: logging.Logger, level: int, message: str, **extra: Any) -> None:
    """Log a message with structured fields.

    Args:
        logger: Logger to use.
        level: Log level (e.g. ``logging.DEBUG``).
        message: Log message.
        **extra: Fields to attach to the record.
    """
    logger.log(level, message, extra=extra)
