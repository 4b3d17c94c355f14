"""Retry a fallible operation with a per-attempt timeout, a fixed delay and cancellation"""

from retryable.application.engine import ExecutionEngine
from retryable.application.retryable import Retryable, retry
from retryable.domain.config import ExecutionConfig, RetryPolicy
from retryable.domain.errors import (
    OperationCancelledError,
    OperationTimeoutError,
    RetryableError,
)
from retryable.domain.models.stats import Stats
from retryable.infrastructure.cancellation import CancellationSignal

__all__ = [
    "CancellationSignal",
    "ExecutionConfig",
    "ExecutionEngine",
    "OperationCancelledError",
    "OperationTimeoutError",
    "RetryPolicy",
    "Retryable",
    "RetryableError",
    "Stats",
    "retry",
]
