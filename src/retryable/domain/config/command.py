"""Command execution configuration model."""

from pydantic import BaseModel


class CommandConfig(BaseModel):
    """Configuration for running shell commands as operations.

    Attributes:
        shell: Run the command through the system shell
    """

    shell: bool = False
