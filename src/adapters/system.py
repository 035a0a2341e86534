"""Default clock and authorization adapters."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable


class SystemClock:
    """ClockPort backed by the system clock, always in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class StaticCapabilities:
    """CapabilityPort for a caller with a fixed set of granted capabilities."""

    def __init__(self, granted: Iterable[str]) -> None:
        self._granted = frozenset(granted)

    def has_capability(self, capability: str) -> bool:
        return capability in self._granted
