"""Action dispatch and link sequencing (core domain).

The dispatcher is the only place that causes side effects: one outbound
post per action, and for new threads, one link write after the post.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from core.action import Action, ActionKind, Service
from core.config import TenantContext
from core.errors import LinkConflictError, LinkWriteError, ValidationError
from core.models import CorrelationLink
from core.ports import ChatClientPort, LinkStorePort, TrackerClientPort

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchResult:
    """What a dispatch did: the action kind handled and any link it wrote."""

    kind: ActionKind
    link: Optional[CorrelationLink] = None


class ActionDispatcher:
    """Sends actions to their target platform and records new links."""

    def __init__(
        self,
        links: LinkStorePort,
        chat: ChatClientPort,
        tracker: TrackerClientPort,
    ) -> None:
        self._links = links
        self._chat = chat
        self._tracker = tracker

    async def dispatch(self, action: Action, tenant: TenantContext) -> DispatchResult:
        """Run one action through the NONE / UPDATE_THREAD / NEW_THREAD states.

        SendError propagates before any link write. A LinkConflictError after a
        successful NEW_THREAD post means another delivery already linked the
        pair, so it is logged and swallowed. Any other link write failure is
        re-raised: the post already happened, and the next event for the same
        card will find no link.
        """

        if action.kind is ActionKind.NONE:
            return DispatchResult(kind=action.kind)

        if action.kind is ActionKind.UPDATE_THREAD:
            if action.target.id is None:
                raise ValidationError("UPDATE_THREAD action has no target id")
            await self._send(action, tenant)
            LOGGER.info(
                "Updated %s thread %s from %s",
                action.target.service.value,
                action.target.id,
                action.source.id,
            )
            return DispatchResult(kind=action.kind)

        # NEW_THREAD: only Trello cards originate Slack threads.
        if action.target.service is not Service.SLACK or action.source.id is None:
            raise ValidationError(
                f"NEW_THREAD from {action.source.service.value} to {action.target.service.value} is not supported"
            )
        posted = await self._chat.post_message(tenant.chat_channel, None, action.update.text)
        link = CorrelationLink(chat_thread_id=posted.thread_id, tracker_card_id=action.source.id)
        try:
            self._links.create(link)
        except LinkConflictError:
            LOGGER.warning(
                "Link already exists for card %s or thread %s, keeping the existing one",
                link.tracker_card_id,
                link.chat_thread_id,
            )
            return DispatchResult(kind=action.kind)
        except LinkWriteError:
            LOGGER.error(
                "Posted thread %s for card %s but could not link them; the next event may start a duplicate thread",
                link.chat_thread_id,
                link.tracker_card_id,
            )
            raise

        LOGGER.info("Linked card %s to thread %s", link.tracker_card_id, link.chat_thread_id)
        return DispatchResult(kind=action.kind, link=link)

    async def _send(self, action: Action, tenant: TenantContext) -> None:
        if action.target.service is Service.SLACK:
            await self._chat.post_message(tenant.chat_channel, action.target.id, action.update.text)
        else:
            await self._tracker.post_comment(action.target.id, action.update.text)
