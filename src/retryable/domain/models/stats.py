"""Stats model - represents the outcome of a run"""

from dataclasses import dataclass
from typing import Any, Optional

from retryable.domain.errors import OperationCancelledError, OperationTimeoutError


@dataclass
class Stats:
    """Outcome of one run"""

    error: Optional[BaseException] = None  # None on success, else the terminal error
    attempts: int = 0  # Iterations performed
    timeout_count: int = 0  # Attempts that hit the per-attempt timeout
    result: Any = None  # Value returned by the successful attempt
    elapsed: float = 0.0  # Wall-clock seconds spent in the run

    @property
    def retry_count(self) -> int:
        """Number of attempts made beyond the first"""
        return max(self.attempts - 1, 0)

    @property
    def is_successful(self) -> bool:
        """Check if the run ended without an error"""
        return self.error is None

    @property
    def timed_out(self) -> bool:
        """Check if the terminal error is a timeout"""
        return isinstance(self.error, OperationTimeoutError)

    @property
    def cancelled(self) -> bool:
        """Check if the run was cancelled"""
        return isinstance(self.error, OperationCancelledError)

    def summary(self) -> str:
        """Format stats as a single human readable line"""
        status = "ok" if self.is_successful else f"error: {self.error}"
        return (
            f"{status} (retries={self.retry_count}, timeouts={self.timeout_count}, "
            f"elapsed={self.elapsed:.3f}s)"
        )
