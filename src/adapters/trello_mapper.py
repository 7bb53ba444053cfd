"""Trello-to-core payload mapping adapter.

This keeps Trello's nested webhook JSON out of the core translator.
"""

from __future__ import annotations

from typing import Any, Optional

from core.errors import ValidationError
from core.models import TrackerActionType, TrackerEvent


def _section(data: Any, key: str) -> dict:
    value = data.get(key) if isinstance(data, dict) else None
    return value if isinstance(value, dict) else {}


def _text(entity: dict) -> Optional[str]:
    value = entity.get("text")
    return value if isinstance(value, str) else None


def build_tracker_event(payload: Any) -> TrackerEvent:
    """Build a core TrackerEvent from a Trello webhook body.

    Card identity and the acting member are required for every action type.
    The list names, description, and comment text are read when present and
    left for the translator to require.
    """

    action = _section(payload, "action")
    if not action:
        raise ValidationError("Trello webhook is missing 'action'")

    display = _section(action, "display")
    entities = _section(display, "entities")
    data = _section(action, "data")
    card = _section(entities, "card")
    data_card = _section(data, "card")
    member = _section(entities, "memberCreator")

    card_id = card.get("id") or data_card.get("id")
    if not card_id:
        raise ValidationError("Trello webhook has no card id")
    member_name = _text(member)
    if member_name is None:
        raise ValidationError(f"Trello webhook for card {card_id} has no member creator")

    raw_key = display.get("translationKey") or action.get("type") or ""
    app_creator = action.get("appCreator")
    app_creator_id = app_creator.get("id") if isinstance(app_creator, dict) else None

    desc = card.get("desc")
    if desc is None:
        desc = data_card.get("desc")

    return TrackerEvent(
        action_type=TrackerActionType.parse(raw_key),
        raw_action_type=raw_key,
        card_id=card_id,
        short_link=card.get("shortLink") or data_card.get("shortLink") or card_id,
        card_name=_text(card) or data_card.get("name") or "",
        member_name=member_name,
        card_desc=desc,
        list_before=_text(_section(entities, "listBefore")),
        list_after=_text(_section(entities, "listAfter")),
        comment_text=data.get("text"),
        app_creator_id=app_creator_id,
    )
