from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from core.errors import StorageUnavailable

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakeStorage:
    def __init__(self) -> None:
        self.options: dict[str, Any] = {}
        self.writes: list[tuple[str, Any]] = []

    def get(self, key: str) -> Optional[Any]:
        return self.options.get(key)

    def set(self, key: str, value: Any) -> None:
        self.options[key] = value
        self.writes.append((key, value))

    def add(self, key: str, value: Any) -> bool:
        if key in self.options:
            return False
        self.set(key, value)
        return True

    def delete(self, key: str) -> None:
        self.options.pop(key, None)


class BrokenStorage:
    """Every operation fails as if the database were down."""

    def get(self, key: str) -> Optional[Any]:
        raise StorageUnavailable("down")

    def set(self, key: str, value: Any) -> None:
        raise StorageUnavailable("down")

    def add(self, key: str, value: Any) -> bool:
        raise StorageUnavailable("down")

    def delete(self, key: str) -> None:
        raise StorageUnavailable("down")


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.current = now

    def now(self) -> datetime:
        return self.current


class FakeCapabilities:
    def __init__(self, allowed: bool = True) -> None:
        self.allowed = allowed
        self.asked: list[str] = []

    def has_capability(self, capability: str) -> bool:
        self.asked.append(capability)
        return self.allowed
