"""Error kinds reported by the execution engine"""

from typing import Optional


class RetryableError(Exception):
    """Base class for errors produced by the engine itself"""

    pass


class OperationTimeoutError(RetryableError):
    """An attempt did not complete within the per-attempt timeout.

    Carries no detail about the operation's eventual outcome.
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout
        if timeout is None:
            message = "Operation timed out"
        else:
            message = f"Operation timed out after {timeout:g}s"
        super().__init__(message)


class OperationCancelledError(RetryableError):
    """The run was cancelled before completion"""

    def __init__(self, message: str = "Operation cancelled"):
        super().__init__(message)
