"""Canonical action model shared by both translators and the dispatcher.

An Action describes what to post and where, independent of which platform
produced the event or which one receives the post.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ActionKind(Enum):
    """What the dispatcher should do with an action."""

    NEW_THREAD = "new_thread"
    UPDATE_THREAD = "update_thread"
    NONE = "none"


class Service(Enum):
    """Platforms an action can originate from or be delivered to."""

    SLACK = "slack"
    TRELLO = "trello"


@dataclass(frozen=True)
class ActionEndpoint:
    """One side of an action.

    ``id`` is the platform-native identifier (Slack thread ts or Trello card
    id) and stays ``None`` for a thread that does not exist yet.
    """

    service: Service
    url: str
    id: Optional[str] = None


@dataclass(frozen=True)
class ActionUpdate:
    text: str


@dataclass(frozen=True)
class Action:
    """The unit of cross-platform intent."""

    kind: ActionKind
    source: ActionEndpoint
    target: ActionEndpoint
    update: ActionUpdate

    @property
    def is_noop(self) -> bool:
        return self.kind is ActionKind.NONE
