"""Core domain models.

These types are shared across the core and adapters to avoid tight coupling
to any storage or transport specific representation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from core.errors import MalformedAction

LEGACY_TOKEN_PREFIX = "worb"


class NoticeDecision(str, Enum):
    """Outcome of a single evaluation. Never persisted."""

    DUE = "due"
    SUPPRESSED = "suppressed"


class ReviewAction(str, Enum):
    """User actions offered by the review notice, valued by wire token."""

    RATE_NOW = "rate"
    REMIND_LATER = "remind-later"
    NEVER_ASK = "never-ask"


@dataclass(frozen=True)
class NotifierState:
    """Snapshot of everything stored for one entity."""

    entity_id: str
    first_seen_at: Optional[datetime]
    last_checked_at: Optional[datetime]
    silenced: bool


def parse_action(token: str, prefix: str) -> ReviewAction:
    """Map an action token to a ReviewAction.

    Older banners post ``<prefix>-later`` and ``<prefix>-nobug`` instead of the
    current tokens, so those are accepted too. Their script always used the
    ``worb`` prefix, whatever the configured one, so that spelling is kept.
    """

    token = (token or "").strip().lower()
    legacy = {}
    for legacy_prefix in (LEGACY_TOKEN_PREFIX, prefix):
        legacy[f"{legacy_prefix}-later"] = ReviewAction.REMIND_LATER
        legacy[f"{legacy_prefix}-nobug"] = ReviewAction.NEVER_ASK
    if token in legacy:
        return legacy[token]
    try:
        return ReviewAction(token)
    except ValueError:
        raise MalformedAction(f"Unknown review action: {token!r}") from None
