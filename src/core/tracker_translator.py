"""Trello card activity to action translation (core domain)."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from core.action import Action, ActionEndpoint, ActionKind, ActionUpdate, Service
from core.errors import ValidationError
from core.models import TrackerActionType, TrackerEvent
from core.urls import trello_card_url

LOGGER = logging.getLogger(__name__)


def _require(event: TrackerEvent, field: str) -> str:
    value = getattr(event, field)
    if value is None:
        raise ValidationError(f"{event.raw_action_type} event for card {event.card_id} is missing {field}")
    return value


def _card_created(event: TrackerEvent) -> str:
    return f"This card {event.card_name} has been created by {event.member_name}"


def _card_archived(event: TrackerEvent) -> str:
    return f"This card has been archived by {event.member_name}"


def _card_renamed(event: TrackerEvent) -> str:
    return f"This card has been renamed to {event.card_name} by {event.member_name}"


def _description_changed(event: TrackerEvent) -> str:
    desc = _require(event, "card_desc")
    return f"This card description has been updated to {desc} by {event.member_name}"


def _card_moved(event: TrackerEvent) -> str:
    before = _require(event, "list_before")
    after = _require(event, "list_after")
    return f"This card has been moved from list {before} to list {after} by {event.member_name}"


def _commented(event: TrackerEvent) -> str:
    comment = _require(event, "comment_text")
    return f"Comment added by {event.member_name}\n{comment}"


RENDERERS: Dict[TrackerActionType, Callable[[TrackerEvent], str]] = {
    TrackerActionType.CARD_CREATED: _card_created,
    TrackerActionType.CARD_ARCHIVED: _card_archived,
    TrackerActionType.CARD_RENAMED: _card_renamed,
    TrackerActionType.DESCRIPTION_CHANGED: _description_changed,
    TrackerActionType.CARD_MOVED: _card_moved,
    TrackerActionType.COMMENTED: _commented,
}


def translate_tracker_event(event: TrackerEvent, thread_id: Optional[str]) -> Action:
    """Turn Trello card activity into an action against the linked Slack thread.

    The update text is rendered first so every outcome can be logged, then
    guards run in order and the first one that applies decides the kind:
    - actions created by an app (including our own comments) are ignored;
    - unknown action types are ignored with an auditable "Unknown key" text;
    - cards without a linked thread start a new Slack thread, Trello is the
      only side allowed to do so;
    - everything else updates the linked thread.

    Raises ValidationError when a field required by the action type is absent.
    """

    renderer = RENDERERS.get(event.action_type)
    if renderer is None:
        text = f"Unknown key {event.raw_action_type!r}"
    else:
        text = renderer(event)

    def build(kind: ActionKind) -> Action:
        return Action(
            kind=kind,
            source=ActionEndpoint(
                service=Service.TRELLO,
                url=trello_card_url(event.short_link),
                id=event.card_id,
            ),
            target=ActionEndpoint(service=Service.SLACK, url="", id=thread_id),
            update=ActionUpdate(text=text),
        )

    if event.app_creator_id is not None:
        LOGGER.info("Skipping app-created Trello action on %s: %s", event.card_id, text)
        return build(ActionKind.NONE)
    if renderer is None:
        LOGGER.info("Skipping Trello action on %s: %s", event.card_id, text)
        return build(ActionKind.NONE)
    if thread_id is None:
        return build(ActionKind.NEW_THREAD)
    return build(ActionKind.UPDATE_THREAD)
