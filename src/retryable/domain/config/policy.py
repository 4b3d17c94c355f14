"""Retry policy configuration model."""

from pydantic import BaseModel, Field


class RetryPolicy(BaseModel):
    """Configuration for retry behaviour loaded from file or environment.

    Attributes:
        max_attempts: Total attempts including the first
        delay: Fixed delay in seconds after a failed attempt
        timeout: Per-attempt timeout in seconds (0 = no timeout)
    """

    max_attempts: int = Field(1, gt=0)
    delay: float = Field(0.0, ge=0.0)
    timeout: float = Field(0.0, ge=0.0)
