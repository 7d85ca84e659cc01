from datetime import datetime, timedelta, timezone

import pytest

from src.hill.store import ItemStore


class FakeClock:
    """Returns a fixed time that advances by one minute per call."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now = current + timedelta(minutes=1)
        return current


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 5, 6, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def store(clock):
    return ItemStore(clock=clock)
