"""Execution engine: runs the attempt loop for one ExecutionConfig.

Each attempt runs the operation on its own daemon thread and races three
events: the attempt finishing, the per-attempt timeout, and cancellation.
The loop itself is driven by tenacity: a fixed delay after a failed attempt,
no delay after a timeout, and no retry at all once cancelled.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
)
from tenacity.wait import wait_base

from retryable.domain.config.execution import ExecutionConfig
from retryable.domain.errors import OperationCancelledError, OperationTimeoutError
from retryable.domain.models.stats import Stats
from retryable.infrastructure.cancellation import AttemptOutcome, Handoff

logger = logging.getLogger(__name__)


def _sleep(seconds: float) -> None:
    time.sleep(seconds)


class _AttemptError(Exception):
    """Carries the error of one attempt out of the race.

    Only the engine raises these, so the loop classifies an attempt by where
    its error came from, never by the type of the error itself.
    """

    def __init__(self, error: BaseException):
        super().__init__(str(error))
        self.error = error


class _OperationFailed(_AttemptError):
    pass


class _RaceTimeout(_AttemptError):
    pass


class _RaceCancelled(_AttemptError):
    pass


class wait_unless_timeout(wait_base):
    """Fixed wait after a failed attempt, none after a timed-out one"""

    def __init__(self, delay: float) -> None:
        self.delay = delay

    def __call__(self, retry_state: RetryCallState) -> float:
        if retry_state.outcome is not None and isinstance(
            retry_state.outcome.exception(), _RaceTimeout
        ):
            return 0.0
        return self.delay


class ExecutionEngine:
    """Runs an operation until it succeeds, attempts run out, or the run is cancelled"""

    def __init__(self, sleep: Callable[[float], None] = _sleep):
        """Initialize engine

        Args:
            sleep: Function used for the inter-attempt delay
        """
        self.sleep = sleep

    def run(self, config: ExecutionConfig) -> Stats:
        """Execute the configured operation

        Never raises for operation errors, timeouts or cancellation: all of
        them are reported through ``Stats.error``.

        Args:
            config: Execution configuration

        Returns:
            Stats of the run
        """
        stats = Stats()
        started = time.monotonic()

        if config.max_attempts < 1:
            logger.warning(
                f"max_attempts is {config.max_attempts}, operation will not be executed"
            )
            return stats

        retrying = Retrying(
            stop=stop_after_attempt(config.max_attempts),
            wait=wait_unless_timeout(config.delay),
            retry=retry_if_exception_type((_OperationFailed, _RaceTimeout)),
            reraise=True,
            before_sleep=self._before_sleep_log(config),
            sleep=self.sleep,
        )

        try:
            stats.result = retrying(self._attempt, config, stats)
        except _AttemptError as e:
            stats.error = e.error
            if isinstance(e, _OperationFailed) and config.delay > 0:
                # The failure delay also follows the last attempt
                self.sleep(config.delay)

        stats.elapsed = time.monotonic() - started
        if stats.is_successful:
            logger.info(f"Operation succeeded after {stats.attempts} attempt(s)")
        else:
            logger.info(f"Operation finished with error: {stats.error} ({stats.summary()})")
        return stats

    def _attempt(self, config: ExecutionConfig, stats: Stats):
        """Run one attempt and wait for the first of: result, timeout, cancellation

        Returns:
            Value returned by the operation

        Raises:
            _RaceCancelled: If cancellation fired
            _RaceTimeout: If the attempt exceeded the timeout
            _OperationFailed: If the operation raised
        """
        stats.attempts += 1
        attempt_number = stats.attempts
        signal = config.cancellation

        if signal.is_cancelled:
            raise _RaceCancelled(OperationCancelledError())

        handoff = signal.handoff()
        worker = threading.Thread(
            target=self._work,
            args=(config.operation, handoff),
            name=f"retryable-attempt-{attempt_number}",
            daemon=True,
        )
        logger.debug(f"Starting attempt {attempt_number}/{config.max_attempts}")
        worker.start()

        timeout = config.timeout if config.timeout > 0 else None
        with signal.condition:
            signal.condition.wait_for(
                lambda: signal.is_cancelled or handoff.ready, timeout
            )
            cancelled = signal.is_cancelled
            outcome = handoff.outcome

        if cancelled:
            logger.debug(f"Attempt {attempt_number} abandoned: run cancelled")
            raise _RaceCancelled(OperationCancelledError())
        if outcome is None:
            stats.timeout_count += 1
            logger.debug(f"Attempt {attempt_number} timed out after {config.timeout:g}s")
            raise _RaceTimeout(OperationTimeoutError(config.timeout))
        if outcome.failed:
            raise _OperationFailed(outcome.error)
        return outcome.value

    @staticmethod
    def _work(operation: Callable, handoff: Handoff) -> None:
        try:
            value = operation()
        except BaseException as e:
            # SystemExit and friends too, so the slot is always written
            handoff.put(AttemptOutcome(error=e))
        else:
            handoff.put(AttemptOutcome(value=value))

    @staticmethod
    def _before_sleep_log(config: ExecutionConfig) -> Callable[[RetryCallState], None]:
        def _log(retry_state: RetryCallState) -> None:
            if retry_state.outcome is None:
                return
            exception = retry_state.outcome.exception()
            attempt = retry_state.attempt_number
            logger.warning(
                f"Attempt {attempt}/{config.max_attempts} failed: {exception}. Retrying..."
            )

        return _log
