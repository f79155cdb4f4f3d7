r"""Helper functions for validation and structured logging."""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "log_structured",
    "to_seconds",
    "validate_delay",
    "validate_max_attempts",
    "validate_max_retries",
    "validate_timeout",
]

from fluentclient.utils.structured_logging import StructuredFormatter, log_structured
from fluentclient.utils.validation import (
    to_seconds,
    validate_delay,
    validate_max_attempts,
    validate_max_retries,
    validate_timeout,
)
