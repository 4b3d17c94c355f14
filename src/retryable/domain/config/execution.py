"""Execution configuration model."""

from datetime import timedelta
from typing import Any, Callable, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from retryable.infrastructure.cancellation import CancellationSignal

Duration = Union[int, float, timedelta]


class ExecutionConfig(BaseModel):
    """Immutable input of one run.

    Attributes:
        operation: Zero-argument callable; raising an exception means failure
        max_attempts: Total attempts including the first (<= 0 runs nothing)
        delay: Seconds to wait after a failed attempt
        timeout: Per-attempt timeout in seconds (0 = no timeout)
        cancellation: Signal that stops the run when fired
    """

    operation: Callable[[], Any]
    max_attempts: int = 1
    delay: float = Field(0.0, ge=0.0)
    timeout: float = Field(0.0, ge=0.0)
    cancellation: CancellationSignal = Field(default_factory=CancellationSignal)

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )

    @field_validator("delay", "timeout", mode="before")
    @classmethod
    def _coerce_duration(cls, value: Any) -> Any:
        if isinstance(value, timedelta):
            return value.total_seconds()
        return value

    def replace(self, **changes: Any) -> "ExecutionConfig":
        """Return a validated copy with some fields replaced"""
        values = {name: getattr(self, name) for name in type(self).model_fields}
        values.update(changes)
        return type(self)(**values)
