"""Run an external command as a fallible operation"""

from __future__ import annotations

import logging
import shlex
import subprocess
from typing import List, Sequence

logger = logging.getLogger(__name__)


class CommandOperation:
    """Zero-argument callable that runs a command and fails on non-zero exit

    A timed-out or cancelled attempt leaves its process running; the engine
    only stops waiting for it.
    """

    def __init__(self, args: Sequence[str], shell: bool = False):
        """Initialize command operation

        Args:
            args: Command and its arguments
            shell: Run the command line through the system shell

        Raises:
            ValueError: If no command is given
        """
        if not args:
            raise ValueError("No command given")
        self.args: List[str] = list(args)
        self.shell = shell
        self.calls = 0

    @property
    def command_line(self) -> str:
        return shlex.join(self.args)

    def __call__(self) -> int:
        """Run the command once

        Returns:
            Exit status (always 0)

        Raises:
            subprocess.CalledProcessError: If the command exits non-zero
            OSError: If the command cannot be started
        """
        self.calls += 1
        logger.debug(f"Running command (call {self.calls}): {self.command_line}")
        target = " ".join(self.args) if self.shell else self.args
        completed = subprocess.run(target, shell=self.shell, check=False)
        if completed.returncode != 0:
            raise subprocess.CalledProcessError(completed.returncode, self.args)
        return completed.returncode
