"""Trello REST API adapter.

Implements the core TrackerClientPort by adding comments to cards.
"""

from __future__ import annotations

import asyncio
import logging
import urllib.error
import urllib.parse
import urllib.request

from adapters.message_formatting import clip_comment
from core.errors import SendError

LOGGER = logging.getLogger(__name__)

API_ROOT = "https://api.trello.com/1"


class TrelloClient:
    """Thin wrapper that satisfies the TrackerClientPort contract."""

    def __init__(self, api_key: str, api_token: str, timeout: float = 10) -> None:
        self._api_key = api_key
        self._api_token = api_token
        self._timeout = timeout

    def _endpoint(self, card_id: str) -> str:
        return f"{API_ROOT}/cards/{urllib.parse.quote(card_id, safe='')}/actions/comments"

    def _post_comment(self, card_id: str, text: str) -> None:
        query = urllib.parse.urlencode(
            {"text": clip_comment(text), "key": self._api_key, "token": self._api_token}
        )
        request = urllib.request.Request(f"{self._endpoint(card_id)}?{query}", data=b"", method="POST")
        request.add_header("Accept", "application/json")
        try:
            with urllib.request.urlopen(request, timeout=self._timeout):
                pass
        except urllib.error.HTTPError as e:
            body = e.read().decode("utf-8", errors="replace")
            raise SendError(f"Trello API error {e.code}: {body}") from e
        except (urllib.error.URLError, OSError) as e:
            raise SendError(f"Trello API request failed: {e}") from e

    async def post_comment(self, card_id: str, text: str) -> None:
        """Add ``text`` as a comment on ``card_id``."""

        try:
            await asyncio.to_thread(self._post_comment, card_id, text)
        except SendError as e:
            LOGGER.error("Commenting on Trello card %s failed: %s", card_id, e)
            raise
