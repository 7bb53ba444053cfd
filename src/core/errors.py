"""Error taxonomy for the relay core.

The HTTP layer maps these to response statuses; the core itself only raises
them and never terminates the process.
"""

from __future__ import annotations


class CoreError(Exception):
    """Base class for every error the core surfaces to its callers."""


class ValidationError(CoreError):
    """A normalized event is malformed or incomplete for its action type."""


class LookupFailedError(CoreError):
    """The link store or a profile lookup was unavailable."""


class ProfileLookupError(LookupFailedError):
    """The Slack user profile could not be fetched."""


class SendError(CoreError):
    """Outbound delivery to Slack or Trello failed."""


class LinkConflictError(CoreError):
    """A link already exists for the Slack thread or the Trello card."""


class LinkWriteError(CoreError):
    """A link could not be written for a reason other than a conflict."""


class UnknownTenantError(CoreError):
    """No account matches the id given in the webhook path."""
