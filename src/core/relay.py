"""Per-platform relay pipelines.

Each relay runs one webhook delivery through a strict order:
1) Look up the correlation link for the event
2) Translate the event into an Action
3) Dispatch the Action (post, then link for new threads)

This module is integration-agnostic. It only relies on ports, so the HTTP
layer calls ``translate_and_dispatch`` once per accepted delivery.
"""

from __future__ import annotations

import logging
from typing import Optional

from core.chat_translator import translate_chat_event
from core.config import TenantContext
from core.dispatcher import ActionDispatcher, DispatchResult
from core.errors import LookupFailedError
from core.models import ChatEvent, TrackerEvent
from core.ports import LinkStorePort, UserProfilePort
from core.tracker_translator import translate_tracker_event

LOGGER = logging.getLogger(__name__)


class ChatEventRelay:
    """Relays Slack thread replies onto their linked Trello card."""

    def __init__(
        self,
        links: LinkStorePort,
        profiles: UserProfilePort,
        dispatcher: ActionDispatcher,
    ) -> None:
        self._links = links
        self._profiles = profiles
        self._dispatcher = dispatcher

    def _find_card(self, thread_id: Optional[str]) -> Optional[str]:
        if thread_id is None:
            return None
        try:
            return self._links.find_by_chat_thread(thread_id)
        except LookupFailedError:
            # A reply we cannot correlate is not actionable either way.
            LOGGER.warning("Link lookup failed for thread %s, treating it as unlinked", thread_id)
            return None

    async def translate_and_dispatch(self, event: ChatEvent, tenant: TenantContext) -> DispatchResult:
        """Process one Slack message for ``tenant``."""

        card_id = self._find_card(event.thread_id)
        action = await translate_chat_event(event, card_id, self._profiles)
        return await self._dispatcher.dispatch(action, tenant)


class TrackerEventRelay:
    """Relays Trello card activity into Slack threads."""

    def __init__(self, links: LinkStorePort, dispatcher: ActionDispatcher) -> None:
        self._links = links
        self._dispatcher = dispatcher

    async def translate_and_dispatch(self, event: TrackerEvent, tenant: TenantContext) -> DispatchResult:
        """Process one Trello action for ``tenant``.

        A failed link lookup propagates: treating it as "no link" would start
        a duplicate thread.
        """

        thread_id = self._links.find_by_tracker_card(event.card_id)
        action = translate_tracker_event(event, thread_id)
        LOGGER.info("Trello action %s on card %s -> %s", event.raw_action_type, event.card_id, action.kind.value)
        return await self._dispatcher.dispatch(action, tenant)
