"""Outbound API client factory for threadlink.

Secrets are read from the environment via python-dotenv to keep them out of
the repo and out of config.json.
"""

from __future__ import annotations

import logging
import os
from typing import Optional, Tuple

from dotenv import load_dotenv

from adapters.slack_client import SlackClient
from adapters.trello_client import TrelloClient


def build_clients() -> Tuple[SlackClient, TrelloClient]:
    """Create the Slack and Trello clients from environment variables.

    SLACK_AUTH_TOKEN is a bot token with chat:write and users.profile:read;
    TRELLO_API_KEY / TRELLO_API_TOKEN authorize card comments.
    """

    load_dotenv()

    slack_token = os.getenv("SLACK_AUTH_TOKEN")
    trello_key = os.getenv("TRELLO_API_KEY")
    trello_token = os.getenv("TRELLO_API_TOKEN")

    # Fail fast on missing credentials instead of failing on the first webhook.
    if not slack_token:
        raise RuntimeError("Missing SLACK_AUTH_TOKEN in environment")
    if not trello_key or not trello_token:
        raise RuntimeError("Missing TRELLO_API_KEY or TRELLO_API_TOKEN in environment")

    logging.getLogger(__name__).info("Initializing Slack and Trello clients")

    return SlackClient(slack_token), TrelloClient(trello_key, trello_token)


def fixed_account_id() -> Optional[str]:
    """Return ACCOUNT_ID when the service runs for a single account."""

    load_dotenv()
    return os.getenv("ACCOUNT_ID") or None
