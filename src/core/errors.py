"""Error types shared by the core and adapters."""

from __future__ import annotations


class ReviewBugError(Exception):
    """Base class for reviewbug errors."""


class StorageUnavailable(ReviewBugError):
    """The option store could not be read or written."""


class Unauthorized(ReviewBugError):
    """A request failed its anti-forgery check."""


class MalformedAction(ReviewBugError):
    """An action token did not map to any known review action."""
