"""Helpers for building human-followable links to threads and cards."""

from __future__ import annotations

from typing import Optional

TRELLO_CARD_URL = "https://trello.com/c/{}"
SLACK_ARCHIVE_URL = "https://slack.com/archives/{}/p{}"


def trello_card_url(card_ref: str) -> str:
    """Return the card link; Trello accepts both short links and card ids."""

    return TRELLO_CARD_URL.format(card_ref)


def slack_message_url(channel: Optional[str], ts: Optional[str]) -> str:
    """Return the archive link of a Slack message, or "" when not derivable."""

    if not channel or not ts:
        return ""
    # Archive links use the ts without its decimal point.
    return SLACK_ARCHIVE_URL.format(channel, ts.replace(".", ""))
