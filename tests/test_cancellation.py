"""Tests for CancellationSignal and Handoff"""

import threading
import time

import pytest

from retryable.infrastructure.cancellation import AttemptOutcome, CancellationSignal


class TestCancellationSignal:
    """Tests for the broadcast cancellation signal"""

    def test_initial_state(self):
        signal = CancellationSignal()
        assert signal.is_cancelled is False

    def test_cancel_fires_once(self):
        """Test only the first cancel reports firing"""
        signal = CancellationSignal()

        assert signal.cancel() is True
        assert signal.cancel() is False
        assert signal.is_cancelled

    def test_condition_wait_times_out(self):
        signal = CancellationSignal()
        with signal.condition:
            assert signal.condition.wait_for(lambda: signal.is_cancelled, 0.01) is False

    def test_cancel_wakes_all_waiters(self):
        """Test every waiting thread observes a cancel from another thread"""
        signal = CancellationSignal()
        results = []

        def waiter():
            with signal.condition:
                results.append(signal.condition.wait_for(lambda: signal.is_cancelled, 5))

        threads = [threading.Thread(target=waiter) for _ in range(3)]
        for t in threads:
            t.start()
        time.sleep(0.02)
        signal.cancel()
        for t in threads:
            t.join(1)

        assert results == [True, True, True]


class TestHandoff:
    """Tests for the single-slot result handoff"""

    def test_put_without_reader_does_not_block(self):
        """Test a write with nobody waiting completes immediately"""
        handoff = CancellationSignal().handoff()
        handoff.put(AttemptOutcome(value=1))

        assert handoff.ready
        assert handoff.outcome.value == 1
        assert not handoff.outcome.failed

    def test_put_after_cancel(self):
        """Test a late write after cancellation is accepted"""
        signal = CancellationSignal()
        handoff = signal.handoff()
        signal.cancel()
        handoff.put(AttemptOutcome(error=ValueError("late")))

        assert handoff.outcome.failed

    def test_single_write(self):
        """Test the slot rejects a second write"""
        handoff = CancellationSignal().handoff()
        handoff.put(AttemptOutcome())

        with pytest.raises(RuntimeError):
            handoff.put(AttemptOutcome())

    def test_put_wakes_waiter(self):
        """Test a write notifies a thread waiting on the shared condition"""
        signal = CancellationSignal()
        handoff = signal.handoff()
        threading.Timer(0.02, handoff.put, args=(AttemptOutcome(value="x"),)).start()

        with signal.condition:
            ready = signal.condition.wait_for(lambda: handoff.ready, 5)

        assert ready
        assert handoff.outcome.value == "x"
