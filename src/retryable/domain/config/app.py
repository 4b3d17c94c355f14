"""Main application configuration model."""

from pydantic import BaseModel, ConfigDict, Field

from retryable.domain.config.command import CommandConfig
from retryable.domain.config.policy import RetryPolicy


class AppConfig(BaseModel):
    """Main application configuration.

    Root model aggregating all configuration sections. Validation is performed
    at load time to fail fast on configuration errors.

    Attributes:
        retry: Retry policy used by the CLI
        command: Command execution settings
    """

    retry: RetryPolicy = Field(default_factory=RetryPolicy)
    command: CommandConfig = Field(default_factory=CommandConfig)

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "retry": {
                    "max_attempts": 3,
                    "delay": 1.0,
                    "timeout": 15.0,
                },
                "command": {
                    "shell": False,
                },
            }
        },
    )
