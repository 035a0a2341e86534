"""Per-entity anti-forgery tokens for the action transport.

Tokens are time-limited: the lifetime is split into two ticks and a token
minted in the current or the previous tick verifies.
"""

from __future__ import annotations

import hashlib
import hmac
import math
import time
from typing import Callable, Optional

DEFAULT_LIFETIME_SECONDS = 24 * 60 * 60
TOKEN_LENGTH = 10


class NonceSigner:
    """Create and verify HMAC nonces bound to an action string."""

    def __init__(
        self,
        secret: str,
        lifetime_seconds: int = DEFAULT_LIFETIME_SECONDS,
        time_source: Optional[Callable[[], float]] = None,
    ) -> None:
        if not secret:
            raise ValueError("A nonce secret is required")
        if lifetime_seconds <= 0:
            raise ValueError("lifetime_seconds must be positive")
        self._secret = secret.encode("utf-8")
        self._lifetime = lifetime_seconds
        self._time = time_source or time.time

    def _tick(self) -> int:
        return math.ceil(self._time() / (self._lifetime / 2))

    def _digest(self, tick: int, action: str) -> str:
        message = f"{tick}|{action}".encode("utf-8")
        return hmac.new(self._secret, message, hashlib.sha256).hexdigest()[:TOKEN_LENGTH]

    def create(self, action: str) -> str:
        return self._digest(self._tick(), action)

    def verify(self, token: Optional[str], action: str) -> bool:
        if not token:
            return False
        tick = self._tick()
        for candidate in (tick, tick - 1):
            if hmac.compare_digest(self._digest(candidate, action), token):
                return True
        return False
