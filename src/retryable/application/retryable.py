"""Fluent builder around ExecutionEngine"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from retryable.application.engine import ExecutionEngine
from retryable.domain.config.execution import Duration, ExecutionConfig
from retryable.domain.config.policy import RetryPolicy
from retryable.domain.models.stats import Stats
from retryable.infrastructure.cancellation import CancellationSignal

logger = logging.getLogger(__name__)


class Retryable:
    """Configures and runs a fallible operation.

    Setters return the builder so calls can be chained::

        stats = retry(poll_api).with_timeout(15).with_delay(3).with_max_attempts(10).run()

    ``cancel()`` may be called from any thread while ``run()`` is blocked.
    The cancellation signal belongs to this builder: once fired, every later
    ``run()`` returns a cancellation error. Use ``reset()`` to get a builder
    with a fresh signal.
    """

    def __init__(
        self,
        operation: Callable[[], Any],
        engine: Optional[ExecutionEngine] = None,
    ):
        """Initialize builder

        Args:
            operation: Zero-argument callable to execute
            engine: Engine to run with (creates default if None)
        """
        self._config = ExecutionConfig(operation=operation)
        self.engine = engine or ExecutionEngine()

    @property
    def config(self) -> ExecutionConfig:
        return self._config

    def with_timeout(self, timeout: Duration) -> "Retryable":
        """Fail an attempt that runs longer than timeout (0 disables the timeout)"""
        self._config = self._config.replace(timeout=timeout)
        return self

    def with_delay(self, delay: Duration) -> "Retryable":
        """Wait delay after each failed attempt"""
        self._config = self._config.replace(delay=delay)
        return self

    def with_max_attempts(self, max_attempts: int) -> "Retryable":
        """Set the total number of attempts, including the first"""
        if max_attempts < 1:
            logger.warning(f"max_attempts={max_attempts}: the operation will never be executed")
        self._config = self._config.replace(max_attempts=max_attempts)
        return self

    def with_policy(self, policy: RetryPolicy) -> "Retryable":
        """Apply every setting of a RetryPolicy"""
        self._config = self._config.replace(
            max_attempts=policy.max_attempts,
            delay=policy.delay,
            timeout=policy.timeout,
        )
        return self

    def cancel(self) -> None:
        """Cancel the run. Safe from any thread and safe to call repeatedly."""
        if self._config.cancellation.cancel():
            logger.info("Run cancelled")

    @property
    def cancelled(self) -> bool:
        return self._config.cancellation.is_cancelled

    def reset(self) -> "Retryable":
        """Return a copy of this builder with a fresh cancellation signal"""
        clone = Retryable(self._config.operation, engine=self.engine)
        clone._config = self._config.replace(cancellation=CancellationSignal())
        return clone

    def run(self) -> Stats:
        """Execute the operation, blocking until the run is terminal"""
        return self.engine.run(self._config)


def retry(operation: Callable[[], Any]) -> Retryable:
    """Create a Retryable for operation

    Defaults: one attempt, no delay, no timeout.
    """
    return Retryable(operation)
