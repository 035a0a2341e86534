from __future__ import annotations

import pytest

from core.config import NotifierConfig
from core.notifier import SnoozeNotifier
from fakes import T0, FakeCapabilities, FakeClock, FakeStorage


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(T0)


@pytest.fixture
def capabilities() -> FakeCapabilities:
    return FakeCapabilities()


@pytest.fixture
def notifier(storage, clock, capabilities) -> SnoozeNotifier:
    return SnoozeNotifier(
        config=NotifierConfig(snooze_days=7),
        store=storage,
        capabilities=capabilities,
        clock=clock,
    )
