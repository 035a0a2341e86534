"""Core configuration dataclasses.

We keep config file parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from core.option_keys import sanitize_prefix

LOGGER = logging.getLogger(__name__)

DEFAULT_SNOOZE_DAYS = 7
DEFAULT_CAPABILITY = "manage_options"
DEFAULT_PREFIX = "worb"
DEFAULT_REVIEW_URL = "https://wordpress.org/support/plugin/{entity_id}/reviews/"


@dataclass(frozen=True)
class NotifierConfig:
    """Snooze and notice settings for the review notifier."""

    snooze_days: int = DEFAULT_SNOOZE_DAYS
    capability: str = DEFAULT_CAPABILITY
    review_url: str = DEFAULT_REVIEW_URL
    prefix: str = DEFAULT_PREFIX

    def __post_init__(self) -> None:
        if isinstance(self.snooze_days, bool) or not isinstance(self.snooze_days, int):
            raise ValueError(f"snooze_days must be an integer, got {self.snooze_days!r}")
        if self.snooze_days <= 0:
            raise ValueError(f"snooze_days must be positive, got {self.snooze_days}")
        if not self.capability:
            raise ValueError("capability is required")
        if not self.prefix:
            raise ValueError("prefix is required")

    def review_url_for(self, entity_id: str) -> str:
        """Resolve the review destination for one entity."""

        return self.review_url.replace("{entity_id}", entity_id)


def _coerce_snooze_days(raw: Any) -> Optional[int]:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


def build_notifier_config(raw: Optional[Mapping[str, Any]]) -> NotifierConfig:
    """Normalize a raw config block into a NotifierConfig.

    Missing or unusable values fall back to the defaults instead of failing,
    so a typo in config.json never disables the notice entirely.
    """

    raw = raw or {}

    snooze_days = DEFAULT_SNOOZE_DAYS
    if "snooze_days" in raw:
        coerced = _coerce_snooze_days(raw["snooze_days"])
        if coerced is None:
            LOGGER.warning(
                "Invalid snooze_days %r, using %s", raw["snooze_days"], DEFAULT_SNOOZE_DAYS
            )
        else:
            snooze_days = coerced

    capability = str(raw.get("capability") or "").strip()
    if not capability:
        if "capability" in raw:
            LOGGER.warning("Empty capability, using %s", DEFAULT_CAPABILITY)
        capability = DEFAULT_CAPABILITY

    prefix = sanitize_prefix(str(raw.get("prefix") or ""))
    if not prefix:
        if "prefix" in raw:
            LOGGER.warning("Unusable prefix %r, using %s", raw["prefix"], DEFAULT_PREFIX)
        prefix = DEFAULT_PREFIX

    review_url = str(raw.get("review_url") or "").strip() or DEFAULT_REVIEW_URL

    return NotifierConfig(
        snooze_days=snooze_days,
        capability=capability,
        review_url=review_url,
        prefix=prefix,
    )
