"""Ports (interfaces) used by the core notifier.

Ports define the minimal contracts for storage, authorization, and time so
that the core can be reused with different backends.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Protocol


class OptionStorePort(Protocol):
    """Key-value operations required by the notifier.

    Implementations raise StorageUnavailable on any backend failure and must
    make each single-key write atomic.
    """

    def get(self, key: str) -> Optional[Any]:
        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def add(self, key: str, value: Any) -> bool:
        """Store value only if key is absent. Return True when written."""
        ...

    def delete(self, key: str) -> None:
        ...


class CapabilityPort(Protocol):
    """Authorization check for the current caller."""

    def has_capability(self, capability: str) -> bool:
        ...


class ClockPort(Protocol):
    """Source of the current time (timezone-aware)."""

    def now(self) -> datetime:
        ...
