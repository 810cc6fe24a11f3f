import threading

import pytest


class SteppingClock:
    """Fake time source advancing a fixed step on every call"""

    def __init__(self, start: float = 1_700_000_000.0, step: float = 1.0):
        self.current = start
        self.step = step
        self._lock = threading.Lock()

    def __call__(self) -> float:
        with self._lock:
            now = self.current
            self.current += self.step
            return now


@pytest.fixture
def clock():
    return SteppingClock()


@pytest.fixture
def frozen_clock():
    return SteppingClock(step=0.0)
