"""Ports (interfaces) used by the relay core.

Ports define the minimal contracts for the link store and the outbound
clients so that the core can be reused with different backends.
"""

from __future__ import annotations

from typing import Optional, Protocol

from core.models import CorrelationLink, PostedMessage


class LinkStorePort(Protocol):
    """Correlation store: two keyed reads and one create-if-absent write.

    Reads raise LookupFailedError when the store is unavailable. ``create``
    raises LinkConflictError when either key is already linked and
    LinkWriteError for any other failure.
    """

    def find_by_chat_thread(self, thread_id: str) -> Optional[str]:
        ...

    def find_by_tracker_card(self, card_id: str) -> Optional[str]:
        ...

    def create(self, link: CorrelationLink) -> None:
        ...


class ChatClientPort(Protocol):
    """Outbound Slack operations. Failures raise SendError."""

    async def post_message(self, channel: str, thread_id: Optional[str], text: str) -> PostedMessage:
        ...


class TrackerClientPort(Protocol):
    """Outbound Trello operations. Failures raise SendError."""

    async def post_comment(self, card_id: str, text: str) -> None:
        ...


class UserProfilePort(Protocol):
    """Slack user profile lookups. Failures raise ProfileLookupError."""

    async def get_display_name(self, user_id: str) -> str:
        ...
