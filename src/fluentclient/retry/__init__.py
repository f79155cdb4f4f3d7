r"""Retry policies and the coordinator applying them.

Public API:
    - RetryPolicy: Pair of a retry predicate and a delay function
    - fixed_intervals: Policy retrying with a fixed list of delays
    - computed_delay: Policy retrying with a computed delay
    - RetryCoordinator: Dispatch loop applying the policies
    - RetryAttempt: Outcome of one dispatch attempt
"""

from __future__ import annotations

__all__ = [
    "RetryAttempt",
    "RetryCoordinator",
    "RetryPolicy",
    "computed_delay",
    "fixed_intervals",
    "honor_retry_after",
    "is_transient",
    "normalize_policies",
    "parse_retry_after",
    "retry_on_status",
]

from fluentclient.retry.attempt import RetryAttempt
from fluentclient.retry.coordinator import RetryCoordinator
from fluentclient.retry.delays import honor_retry_after, parse_retry_after
from fluentclient.retry.policy import (
    RetryPolicy,
    computed_delay,
    fixed_intervals,
    is_transient,
    normalize_policies,
    retry_on_status,
)
