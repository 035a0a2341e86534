"""Snooze notifier: decides when the review notice is due.

This module is integration-agnostic. It only relies on ports for storage,
authorization, and time, so any request router can call it at its own
lifecycle points (activation, page load, user action, deactivation).
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from core.config import NotifierConfig
from core.errors import StorageUnavailable
from core.models import NoticeDecision, NotifierState, ReviewAction
from core.option_keys import (
    ALL_SUFFIXES,
    SUFFIX_ACTIVATION,
    SUFFIX_CHECK,
    SUFFIX_NOBUG,
    build_option_name,
)
from core.ports import CapabilityPort, ClockPort, OptionStorePort

LOGGER = logging.getLogger(__name__)


def to_timestamp(moment: datetime) -> int:
    """Convert a datetime to whole epoch seconds. Naive values are UTC."""

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp())


def from_timestamp(value: Any) -> Optional[datetime]:
    """Convert a stored option value back to a UTC datetime.

    Empty or zero values count as absent, matching how the option has always
    been checked for truthiness.
    """

    if value is None or isinstance(value, bool):
        return None
    try:
        seconds = int(value)
    except (TypeError, ValueError):
        LOGGER.warning("Ignoring unreadable timestamp option value %r", value)
        return None
    if seconds <= 0:
        return None
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        LOGGER.warning("Ignoring out-of-range timestamp option value %r", value)
        return None


class SnoozeNotifier:
    """Tracks check timestamps and the silenced flag per entity."""

    def __init__(
        self,
        config: NotifierConfig,
        store: OptionStorePort,
        capabilities: CapabilityPort,
        clock: ClockPort,
    ) -> None:
        self._config = config
        self._store = store
        self._capabilities = capabilities
        self._clock = clock

    @property
    def config(self) -> NotifierConfig:
        return self._config

    def _key(self, entity_id: str, suffix: str) -> str:
        return build_option_name(self._config.prefix, entity_id, suffix)

    def review_url(self, entity_id: str) -> str:
        return self._config.review_url_for(entity_id)

    def on_activate(self, entity_id: str) -> None:
        """Record the first check timestamp unless one already exists."""

        stamp = to_timestamp(self._clock.now())
        # add() is insert-if-absent, so re-activation never resets the cooldown.
        if self._store.add(self._key(entity_id, SUFFIX_CHECK), stamp):
            LOGGER.info("Check timestamp recorded for %s", entity_id)
        self._store.add(self._key(entity_id, SUFFIX_ACTIVATION), stamp)

    def evaluate(
        self,
        entity_id: str,
        now: Optional[datetime] = None,
        caller_has_capability: Optional[bool] = None,
    ) -> NoticeDecision:
        """Return whether the review notice should be shown right now.

        The only write is the lazy initialization of a missing check
        timestamp. Storage failures suppress the notice rather than raise.
        """

        if caller_has_capability is None:
            caller_has_capability = self._capabilities.has_capability(self._config.capability)
        if not caller_has_capability:
            return NoticeDecision.SUPPRESSED

        moment = now or self._clock.now()
        try:
            return self._decide(entity_id, moment)
        except StorageUnavailable:
            LOGGER.warning(
                "Option store unavailable while evaluating %s; suppressing notice",
                entity_id,
                exc_info=True,
            )
            return NoticeDecision.SUPPRESSED

    def _decide(self, entity_id: str, moment: datetime) -> NoticeDecision:
        if self._store.get(self._key(entity_id, SUFFIX_NOBUG)):
            return NoticeDecision.SUPPRESSED

        check_key = self._key(entity_id, SUFFIX_CHECK)
        raw_check = self._store.get(check_key)
        last_checked_at = from_timestamp(raw_check)
        if last_checked_at is None:
            # First evaluation starts the grace period instead of nagging.
            if raw_check is None:
                self._store.add(check_key, to_timestamp(moment))
            else:
                self._store.set(check_key, to_timestamp(moment))
            LOGGER.info("Grace period started for %s", entity_id)
            return NoticeDecision.SUPPRESSED

        try:
            due_at = last_checked_at + timedelta(days=self._config.snooze_days)
        except OverflowError:
            LOGGER.warning("Check timestamp for %s is too far in the future", entity_id)
            return NoticeDecision.SUPPRESSED
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        if moment >= due_at:
            return NoticeDecision.DUE
        return NoticeDecision.SUPPRESSED

    def apply_action(
        self,
        entity_id: str,
        action: ReviewAction,
        now: Optional[datetime] = None,
    ) -> None:
        """Apply one user action. Write failures propagate to the caller."""

        if action is ReviewAction.RATE_NOW:
            # Navigation to the review page is handled by the presentation layer.
            return

        if action is ReviewAction.REMIND_LATER:
            moment = now or self._clock.now()
            self._store.set(self._key(entity_id, SUFFIX_CHECK), to_timestamp(moment))
            LOGGER.info("Review notice snoozed for %s", entity_id)
            return

        if action is ReviewAction.NEVER_ASK:
            self._store.set(self._key(entity_id, SUFFIX_NOBUG), True)
            LOGGER.info("Review notice silenced for %s", entity_id)
            return

        raise ValueError(f"Unsupported review action: {action!r}")

    def on_deactivate(self, entity_id: str) -> None:
        """Forget everything stored for the entity."""

        for suffix in ALL_SUFFIXES:
            self._store.delete(self._key(entity_id, suffix))
        LOGGER.info("Review state cleared for %s", entity_id)

    def state(self, entity_id: str) -> NotifierState:
        """Return a snapshot of the stored state for the entity."""

        return NotifierState(
            entity_id=entity_id,
            first_seen_at=from_timestamp(self._store.get(self._key(entity_id, SUFFIX_ACTIVATION))),
            last_checked_at=from_timestamp(self._store.get(self._key(entity_id, SUFFIX_CHECK))),
            silenced=bool(self._store.get(self._key(entity_id, SUFFIX_NOBUG))),
        )
