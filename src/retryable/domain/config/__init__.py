"""Configuration models with Pydantic validation."""

from retryable.domain.config.app import AppConfig
from retryable.domain.config.command import CommandConfig
from retryable.domain.config.execution import Duration, ExecutionConfig
from retryable.domain.config.policy import RetryPolicy

__all__ = [
    "AppConfig",
    "CommandConfig",
    "Duration",
    "ExecutionConfig",
    "RetryPolicy",
]
