"""Cancellation signal and per-attempt result handoff.

Both primitives share one ``threading.Condition``: the signal owns it, and each
attempt's handoff slot notifies it when the attempt finishes. The engine can
therefore wait for "attempt finished OR cancelled OR timeout" with a single
``Condition.wait_for`` call instead of polling.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttemptOutcome:
    """Result of one attempt, as produced by its worker thread"""

    value: Any = None
    error: Optional[BaseException] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class CancellationSignal:
    """One-shot, broadcast-once cancellation flag.

    ``cancel()`` may be called from any thread, any number of times; only the
    first call has an effect and no call ever blocks on a waiting run.
    """

    def __init__(self) -> None:
        self._condition = threading.Condition()
        self._cancelled = False

    @property
    def condition(self) -> threading.Condition:
        return self._condition

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> bool:
        """Fire the signal

        Returns:
            True if this call fired it, False if it was already fired
        """
        with self._condition:
            if self._cancelled:
                return False
            self._cancelled = True
            self._condition.notify_all()
        logger.debug("Cancellation signal fired")
        return True

    def handoff(self) -> "Handoff":
        """Create a result slot for one attempt, bound to this signal"""
        return Handoff(self._condition)


class Handoff:
    """Single-slot, write-once channel between an attempt thread and the engine.

    ``put`` never blocks on a reader and is always accepted once: the engine
    gives each attempt its own slot and the attempt thread writes it exactly
    once. If the engine stopped waiting (timeout or cancellation) the value
    simply stays in the slot until the slot is dropped. A second write is a
    programming error and raises RuntimeError.
    """

    def __init__(self, condition: threading.Condition) -> None:
        self._condition = condition
        self._outcome: Optional[AttemptOutcome] = None

    @property
    def ready(self) -> bool:
        return self._outcome is not None

    @property
    def outcome(self) -> Optional[AttemptOutcome]:
        return self._outcome

    def put(self, outcome: AttemptOutcome) -> None:
        with self._condition:
            if self._outcome is not None:
                raise RuntimeError("Handoff slot already written")
            self._outcome = outcome
            self._condition.notify_all()
