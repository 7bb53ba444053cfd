"""Slack Web API adapter.

Implements the core ChatClientPort and UserProfilePort on top of
chat.postMessage and users.profile.get.
"""

from __future__ import annotations

import asyncio
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Optional

from adapters.message_formatting import escape_slack_text
from core.errors import ProfileLookupError, SendError
from core.models import PostedMessage

LOGGER = logging.getLogger(__name__)

API_ROOT = "https://slack.com/api"


class SlackApiError(Exception):
    """Slack answered with ok=false or a non-2xx status."""


class SlackClient:
    """Blocking urllib calls run in a worker thread to keep the loop free."""

    def __init__(self, token: str, timeout: float = 10) -> None:
        self._token = token
        self._timeout = timeout

    def _endpoint(self, method: str) -> str:
        return f"{API_ROOT}/{method}"

    def _call(self, method: str, data: bytes, content_type: str) -> dict:
        request = urllib.request.Request(self._endpoint(method), data=data, method="POST")
        request.add_header("Content-Type", content_type)
        request.add_header("Authorization", f"Bearer {self._token}")
        try:
            with urllib.request.urlopen(request, timeout=self._timeout) as response:
                body = json.loads(response.read().decode("utf-8"))
        except urllib.error.HTTPError as e:
            body = e.read().decode("utf-8", errors="replace")
            raise SlackApiError(f"Slack {method} error {e.code}: {body}") from e
        except (urllib.error.URLError, OSError, ValueError) as e:
            raise SlackApiError(f"Slack {method} failed: {e}") from e

        if not body.get("ok"):
            raise SlackApiError(f"Slack {method} returned {body.get('error', 'unknown_error')}")
        return body

    def _post_message(self, channel: str, thread_id: Optional[str], text: str) -> PostedMessage:
        payload = {"channel": channel, "text": escape_slack_text(text)}
        if thread_id is not None:
            payload["thread_ts"] = thread_id
        body = self._call(
            "chat.postMessage",
            json.dumps(payload).encode("utf-8"),
            "application/json; charset=utf-8",
        )
        ts = body.get("ts")
        if not ts:
            raise SlackApiError("Slack chat.postMessage response has no ts")
        # A top-level post starts its own thread; replies keep the parent ts.
        return PostedMessage(thread_id=thread_id or ts, message_id=ts)

    def _get_display_name(self, user_id: str) -> str:
        body = self._call(
            "users.profile.get",
            urllib.parse.urlencode({"user": user_id}).encode("utf-8"),
            "application/x-www-form-urlencoded; charset=utf-8",
        )
        profile = body.get("profile") or {}
        return profile.get("display_name") or profile.get("real_name") or ""

    async def post_message(self, channel: str, thread_id: Optional[str], text: str) -> PostedMessage:
        """Post ``text`` to ``channel``; a None ``thread_id`` starts a new thread."""

        try:
            return await asyncio.to_thread(self._post_message, channel, thread_id, text)
        except SlackApiError as e:
            LOGGER.error("Posting to Slack channel %s failed: %s", channel, e)
            raise SendError(str(e)) from e

    async def get_display_name(self, user_id: str) -> str:
        try:
            return await asyncio.to_thread(self._get_display_name, user_id)
        except SlackApiError as e:
            raise ProfileLookupError(str(e)) from e
