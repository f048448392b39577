"""Shared fixtures for the memfs test suite."""

from __future__ import annotations

import pytest

from memfs.notifier import ChangeNotifier
from memfs.store import EntryStore


class FakeClock:
    """Monotonic fake clock advancing one second per reading."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        self.now += 1.0
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def notifier():
    # Long delay: tests flush explicitly instead of waiting on the timer.
    notifier = ChangeNotifier(delay=60.0)
    yield notifier
    notifier.close()


@pytest.fixture
def store(notifier, clock) -> EntryStore:
    return EntryStore(notifier, clock=clock)


@pytest.fixture
def batches(notifier):
    received = []
    subscription = notifier.on_did_change(received.append)
    yield received
    subscription.dispose()
