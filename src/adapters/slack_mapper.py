"""Slack-to-core payload mapping adapter.

Slack posts two kinds of bodies to the Events API endpoint: the one-time
url_verification handshake and event_callback envelopes. The top-level
``type`` decides which one we have before anything else is read.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

from core.errors import ValidationError
from core.models import ChatEvent
from core.urls import slack_message_url


@dataclass(frozen=True)
class SlackChallenge:
    challenge: str


@dataclass(frozen=True)
class SlackEventCallback:
    event_id: str
    team_id: str
    event: ChatEvent


@dataclass(frozen=True)
class UnrecognizedSlackPayload:
    type: str


SlackPayload = Union[SlackChallenge, SlackEventCallback, UnrecognizedSlackPayload]


def _required(data: dict, key: str, where: str) -> Any:
    value = data.get(key)
    if value is None or value == "":
        raise ValidationError(f"Slack {where} is missing {key!r}")
    return value


def build_chat_event(event: dict) -> ChatEvent:
    """Build a core ChatEvent from the inner ``event`` object."""

    channel = _required(event, "channel", "event")
    ts = _required(event, "ts", "event")
    thread_id: Optional[str] = event.get("thread_ts") or None
    # Bot posts carry bot_id; legacy integrations only set the subtype.
    is_bot = bool(event.get("bot_id")) or event.get("subtype") == "bot_message"

    return ChatEvent(
        user_id=event.get("user") or "",
        text=event.get("text") or "",
        channel=channel,
        ts=ts,
        thread_id=thread_id,
        is_bot=is_bot,
        permalink=slack_message_url(channel, ts),
    )


def parse_slack_payload(payload: Any) -> SlackPayload:
    """Classify a decoded Slack request body."""

    if not isinstance(payload, dict):
        raise ValidationError("Slack payload must be a JSON object")

    payload_type = payload.get("type")
    if payload_type == "url_verification":
        return SlackChallenge(challenge=_required(payload, "challenge", "url_verification"))

    if payload_type == "event_callback":
        event = payload.get("event")
        if not isinstance(event, dict):
            raise ValidationError("Slack event_callback is missing 'event'")
        return SlackEventCallback(
            event_id=payload.get("event_id") or "",
            team_id=payload.get("team_id") or event.get("team") or "",
            event=build_chat_event(event),
        )

    return UnrecognizedSlackPayload(type=str(payload_type))
