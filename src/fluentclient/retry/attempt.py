r"""Record describing one dispatch attempt of a coordination."""

from __future__ import annotations

__all__ = ["RetryAttempt"]

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


@dataclass(frozen=True)
class RetryAttempt:
    """Outcome of one dispatch attempt.

    Exactly one of ``response`` and ``error`` is set.

    Attributes:
        attempt: The attempt number (1-indexed). The first dispatch is 1.
        response: The response received, if any.
        error: The transport error raised by the dispatch, if any.
        elapsed_delay: The seconds waited before this attempt (0 for the
            first attempt).
    """

    attempt: int
    response: httpx.Response | None = None
    error: Exception | None = None
    elapsed_delay: float = 0.0

    @property
    def status_code(self) -> int | None:
        return self.response.status_code if self.response is not None else None
