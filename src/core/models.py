"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to Slack or Trello payload shapes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class ChatEvent:
    """Minimal Slack message context used by the chat translator."""

    user_id: str
    text: str
    channel: str
    ts: str
    thread_id: Optional[str]
    is_bot: bool
    permalink: Optional[str] = None


class TrackerActionType(Enum):
    """Trello activity types the relay knows how to render."""

    CARD_CREATED = "action_create_card"
    CARD_ARCHIVED = "action_archived_card"
    CARD_RENAMED = "action_renamed_card"
    DESCRIPTION_CHANGED = "action_changed_description_of_card"
    CARD_MOVED = "action_move_card_from_list_to_list"
    COMMENTED = "action_comment_on_card"
    UNRECOGNIZED = "unrecognized"

    @classmethod
    def parse(cls, raw: str) -> "TrackerActionType":
        """Map a Trello translation key, falling back to UNRECOGNIZED."""

        for member in cls:
            if member is not cls.UNRECOGNIZED and member.value == raw:
                return member
        return cls.UNRECOGNIZED


@dataclass(frozen=True)
class TrackerEvent:
    """Normalized Trello card activity.

    Optional fields are only populated for the action types that carry them:
    list names for moves, comment text for comments, description for
    description changes.
    """

    action_type: TrackerActionType
    raw_action_type: str
    card_id: str
    short_link: str
    card_name: str
    member_name: str
    card_desc: Optional[str] = None
    list_before: Optional[str] = None
    list_after: Optional[str] = None
    comment_text: Optional[str] = None
    app_creator_id: Optional[str] = None


@dataclass(frozen=True)
class CorrelationLink:
    """Durable 1:1 record tying a Slack thread to a Trello card."""

    chat_thread_id: str
    tracker_card_id: str


@dataclass(frozen=True)
class PostedMessage:
    """What Slack returns after a successful post."""

    thread_id: str
    message_id: str
