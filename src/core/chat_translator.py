"""Slack message to action translation (core domain)."""

from __future__ import annotations

import logging
from typing import Optional

from core.action import Action, ActionEndpoint, ActionKind, ActionUpdate, Service
from core.errors import ProfileLookupError
from core.models import ChatEvent
from core.ports import UserProfilePort
from core.urls import slack_message_url, trello_card_url

LOGGER = logging.getLogger(__name__)


def _source(event: ChatEvent) -> ActionEndpoint:
    return ActionEndpoint(
        service=Service.SLACK,
        url=event.permalink or slack_message_url(event.channel, event.thread_id),
        id=event.thread_id,
    )


def _target(card_id: Optional[str]) -> ActionEndpoint:
    if card_id is None:
        return ActionEndpoint(service=Service.TRELLO, url="")
    return ActionEndpoint(service=Service.TRELLO, url=trello_card_url(card_id), id=card_id)


def _ignored(event: ChatEvent, card_id: Optional[str], reason: str) -> Action:
    LOGGER.info("Skipping Slack message %s: %s", event.ts, reason)
    return Action(
        kind=ActionKind.NONE,
        source=_source(event),
        target=_target(card_id),
        update=ActionUpdate(text=""),
    )


async def resolve_display_name(profiles: UserProfilePort, user_id: str) -> str:
    """Fetch a display name, degrading to "" when the profile is unavailable."""

    if not user_id:
        return ""
    try:
        return await profiles.get_display_name(user_id)
    except ProfileLookupError:
        LOGGER.warning("Profile lookup failed for %s, posting without a name", user_id)
        return ""


async def translate_chat_event(
    event: ChatEvent,
    card_id: Optional[str],
    profiles: UserProfilePort,
) -> Action:
    """Turn a Slack message into an action against the linked Trello card.

    Guards run in order and the first one that applies decides the outcome:
    - messages from bots are ignored so our own replies do not echo back;
    - top-level messages are ignored, only thread replies are relayed;
    - replies in threads with no linked card are ignored, Slack never
      originates Trello cards.
    Anything left is an UPDATE_THREAD carrying "<name> posted in chat".
    """

    if event.is_bot:
        return _ignored(event, card_id, "bot message")
    if event.thread_id is None:
        return _ignored(event, card_id, "not a thread reply")
    if card_id is None:
        return _ignored(event, card_id, "thread has no linked card")

    # Profile lookup only happens for messages we are going to relay.
    display_name = await resolve_display_name(profiles, event.user_id)
    return Action(
        kind=ActionKind.UPDATE_THREAD,
        source=_source(event),
        target=_target(card_id),
        update=ActionUpdate(text=f"{display_name} posted in chat\n{event.text}"),
    )
