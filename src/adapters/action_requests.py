"""Action transport adapter.

Accepts the form fields posted by the review notice (``action``,
``security``, ``action_performed``), checks the anti-forgery token, and
dispatches to the notifier. The HTTP layer itself belongs to the host.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from adapters.nonce import NonceSigner
from core.errors import MalformedAction, Unauthorized
from core.models import ReviewAction, parse_action
from core.notifier import SnoozeNotifier
from core.option_keys import build_ajax_action, build_nonce_action

LOGGER = logging.getLogger(__name__)


class ActionRequestHandler:
    """Validate and dispatch one posted review action."""

    def __init__(self, notifier: SnoozeNotifier, signer: NonceSigner) -> None:
        self._notifier = notifier
        self._signer = signer

    @property
    def _prefix(self) -> str:
        return self._notifier.config.prefix

    def ajax_action(self, entity_id: str) -> str:
        return build_ajax_action(self._prefix, entity_id)

    def create_nonce(self, entity_id: str) -> str:
        """Mint the token the notice embeds for this entity."""

        return self._signer.create(build_nonce_action(self._prefix, entity_id))

    def handle(self, entity_id: str, payload: Mapping[str, str]) -> Optional[ReviewAction]:
        """Apply the posted action and return it, or None for a no-op.

        Raises Unauthorized when the token does not verify. Storage write
        failures propagate unchanged.
        """

        token = payload.get("security")
        if not self._signer.verify(token, build_nonce_action(self._prefix, entity_id)):
            LOGGER.warning("Rejected review action for %s: bad security token", entity_id)
            raise Unauthorized(f"Invalid security token for {entity_id}")

        posted_action = payload.get("action")
        if posted_action and posted_action != self.ajax_action(entity_id):
            LOGGER.debug("Ignoring action %s posted for %s", posted_action, entity_id)
            return None

        performed = payload.get("action_performed")
        if not performed:
            return None

        try:
            action = parse_action(performed, self._prefix)
        except MalformedAction:
            LOGGER.debug("Ignoring unknown review action %r for %s", performed, entity_id)
            return None

        self._notifier.apply_action(entity_id, action)
        return action
