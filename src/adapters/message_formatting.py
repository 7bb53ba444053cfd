"""Outbound text formatting helpers.

Keeping formatting here prevents drift between the Slack and Trello clients.
"""

from __future__ import annotations


def escape_slack_text(text: str) -> str:
    """Escape the three characters Slack treats as mrkdwn control sequences."""

    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def clip_comment(text: str, limit: int = 16384) -> str:
    """Trello rejects comments longer than 16384 characters."""

    if len(text) <= limit:
        return text
    return text[: limit - 1].rstrip() + "…"
